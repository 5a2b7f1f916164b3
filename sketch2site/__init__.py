"""
Sketch to Website

Turns a hand-drawn website mockup into component suggestions and then into
HTML/CSS/JavaScript through a chain of dependent LLM calls.
"""

__version__ = "0.1.0"
