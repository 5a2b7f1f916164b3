"""
Prompt templates for each agent.

Templates use str.format placeholders; literal JSON braces are doubled.
"""

VISION_SYSTEM_PROMPT = """You are a UX/UI expert analyzing hand-drawn website sketches.
You describe what the sketch shows precisely and return structured JSON only."""


VISION_PROMPT = """Analyze this hand-drawn website sketch and identify:

1. **Layout Structure**: the overall layout (header, hero, content sections, footer, etc.)
2. **Components**: every UI element (buttons, text blocks, images, forms, navigation, etc.)
3. **Hierarchy**: the visual hierarchy and importance of elements
4. **Text Content**: any visible text or labels
5. **Positioning**: where elements sit (top, center, bottom, left, right)
6. **Intended Purpose**: the kind of website (landing page, blog, portfolio, etc.)

Return your analysis in JSON format:
{{
  "layoutType": "single-column | two-column | grid | complex",
  "sections": [
    {{
      "type": "header | hero | content | footer | etc",
      "position": "top | middle | bottom",
      "description": "detailed description",
      "elements": ["list of elements in this section"]
    }}
  ],
  "components": [
    {{
      "type": "button | text | image | form | navbar | etc",
      "position": {{ "x": "left|center|right", "y": "top|middle|bottom" }},
      "content": "text content or description",
      "size": "small | medium | large",
      "importance": "primary | secondary | tertiary"
    }}
  ],
  "textContent": ["list of all text found"],
  "websiteType": "landing | blog | portfolio | ecommerce | etc",
  "colorIndications": "any color notes from sketch"
}}

Be detailed and precise. If something is unclear, give your best interpretation."""


LAYOUT_SYSTEM_PROMPT = """You are a web layout expert. Analyze sketch descriptions and suggest optimal HTML/CSS layout structures.
Focus on semantic HTML5, modern CSS (Flexbox/Grid), and responsive design principles."""


LAYOUT_PROMPT = """Based on this vision analysis of a website sketch, suggest the optimal layout structure:

{vision_analysis}

Provide a detailed layout plan in JSON:
{{
  "layoutStrategy": "describe overall approach",
  "containerStructure": {{
    "type": "flexbox | grid | hybrid",
    "columns": 1,
    "rows": 1,
    "areas": ["header", "main", "sidebar", "footer"]
  }},
  "sections": [
    {{
      "name": "header",
      "htmlTag": "header",
      "layout": "flex",
      "justifyContent": "space-between",
      "children": ["logo", "nav"]
    }}
  ],
  "responsiveBreakpoints": {{
    "mobile": "< 768px - strategy",
    "tablet": "768px - 1024px - strategy",
    "desktop": "> 1024px - strategy"
  }},
  "recommendations": ["list of best practices"]
}}"""


COMPONENT_SYSTEM_PROMPT = """You are a component mapping expert. Map sketched elements to pre-built web components.
Available components: {component_types}.
Provide detailed component specifications with properties."""


COMPONENT_PROMPT = """Map these sketch elements to components:

Vision Analysis:
{vision_analysis}

Layout Structure:
{layout_analysis}

For each identified element, return:
{{
  "components": [
    {{
      "id": "unique-id",
      "type": "one of the available component types",
      "confidence": 0.0,
      "position": {{ "x": 0, "y": 0 }},
      "size": {{ "width": 0, "height": 0 }},
      "properties": {{
        "text": "content",
        "variant": "style variant"
      }},
      "styles": {{
        "backgroundColor": "",
        "color": "",
        "padding": ""
      }},
      "reasoning": "why this component",
      "alternatives": ["other possible component types"]
    }}
  ],
  "hierarchy": "description of component tree",
  "interactions": ["any interactive elements noted"]
}}

Confidence must be between 0.0 and 1.0. Position and size are in sketch pixels."""


REFINE_PROMPT = """Based on this sketch analysis, provide detailed properties for a {component_type} component:

Analysis:
{analysis}

Return JSON with specific properties:
{{
  "type": "{component_type}",
  "properties": {{}},
  "styling": {{
    "backgroundColor": "",
    "color": "",
    "padding": "",
    "fontSize": ""
  }},
  "content": {{}}
}}"""


HTML_SYSTEM_PROMPT = """You are an expert HTML developer. Generate clean, semantic HTML5 code.
Use proper tags, accessibility attributes, and modern best practices.
Do NOT use any frameworks or libraries - only pure HTML."""


HTML_PROMPT = """Generate HTML for these components:

{components}

Page layout:
{layout}

Requirements:
- Semantic HTML5 tags
- Proper structure and nesting
- Accessibility attributes (alt, aria-labels, etc.)
- Clean, readable code with comments
- No inline styles (CSS is added separately)
- Body content only, no <html>, <head> or <body> wrapper

Return ONLY the HTML code, no markdown formatting."""


CSS_SYSTEM_PROMPT = """You are an expert CSS developer. Generate modern, responsive CSS.
Use CSS Grid, Flexbox, custom properties, and a mobile-first approach.
Do NOT use any frameworks - only pure CSS."""


CSS_PROMPT = """Generate CSS for this website:

Components:
{components}

HTML:
{html}

Requirements:
- Modern CSS3 with custom properties (variables)
- Responsive design (mobile-first)
- Flexbox and Grid where appropriate
- Smooth transitions and hover effects
- Accessibility (focus states, etc.)
- Comments for sections

Return ONLY the CSS code, no markdown formatting."""


JS_SYSTEM_PROMPT = """You are an expert JavaScript developer. Generate clean, vanilla JavaScript.
No frameworks or libraries - only pure JavaScript (ES6+).
Focus on accessibility, performance, and best practices."""


JS_PROMPT = """Generate JavaScript for these interactions:

Components:
{components}

Interactive Elements:
{interactivity}

Requirements:
- Vanilla JavaScript (ES6+)
- Event delegation where appropriate
- Accessibility (keyboard navigation, focus management)
- Error handling
- No external dependencies

Return ONLY the JavaScript code, no markdown formatting."""
