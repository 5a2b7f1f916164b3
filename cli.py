#!/usr/bin/env python3
"""
Command-line interface for the sketch-to-website pipelines.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from sketch2site.components import accept_suggestions, component_to_dict
from sketch2site.config import Settings
from sketch2site.errors import AgentError, ErrorKind, ServiceUnavailable
from sketch2site.io.artifacts import ArtifactManager
from sketch2site.io.project_store import ProjectStore
from sketch2site.io.sketch_loader import SketchLoader
from sketch2site.models import AnalysisStatus, SketchAnalysis
from sketch2site.orchestration.service import SketchOrchestrator

# Load environment variables
load_dotenv()


ERROR_HINTS = {
    ErrorKind.INVALID_CREDENTIALS: "Check the API keys in your .env file.",
    ErrorKind.RATE_LIMITED: "Rate limit hit. Try again shortly.",
    ErrorKind.INSUFFICIENT_CREDITS: "Add credits to your account or switch MODEL_TIER to free.",
    ErrorKind.BAD_REQUEST: "The request was rejected. Check the model ids and the input image.",
    ErrorKind.TIMEOUT: "The model took too long. Try again.",
    ErrorKind.AGENT_FAILURE: "The model call failed.",
}


def _print_agent_error(error: AgentError):
    print(f"❌ {error}")
    print(f"💡 {ERROR_HINTS.get(error.kind, '')}")


def _write_json(path: Path, data) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    return path


def _load_analysis(path: Path) -> dict:
    data = json.loads(path.read_text(encoding="utf-8"))
    if "fullAnalysis" not in data:
        raise ValueError(f"Not an analysis file: {path}")
    return data


def _print_analysis(result):
    icon = "✅" if result.status == AnalysisStatus.SUCCESS else "⚠️ "
    print(f"{icon} Analysis {result.status.value}")
    print(f"📐 Layout: {result.full_analysis.layout.type}")
    print(f"🧩 Suggestions: {len(result.component_suggestions)}")
    for index, suggestion in enumerate(result.component_suggestions):
        print(f"   {index}. {suggestion.suggested_type.value:<10} {suggestion.confidence:.2f}  {suggestion.reasoning}")
    for error in result.errors or []:
        print(f"   ❌ {error}")
    for warning in result.warnings:
        print(f"   ⚠️  {warning}")


def _print_generation(result, paths):
    icon = "✅" if result.complete else "⚠️ "
    print(f"{icon} Generation {'complete' if result.complete else 'incomplete'}")
    for error in result.errors or []:
        print(f"   ❌ {error}")
    print(f"📄 HTML: {paths['index']}")
    print(f"🎨 CSS: {paths['styles']}")
    print(f"⚙️  JS: {paths['script']}")
    print(f"👁️  Preview: {paths['preview']}")


def cmd_analyze(args):
    """Analyze a sketch image and write the analysis JSON."""
    print("🔍 Analyzing sketch...")

    sketch_path = Path(args.sketch)
    if not sketch_path.exists():
        print(f"❌ Error: Sketch not found: {sketch_path}")
        return 1

    print(f"🖼️  Sketch: {sketch_path}")
    image_base64 = SketchLoader(max_edge=args.max_edge).load_base64(sketch_path)

    orchestrator = SketchOrchestrator(Settings.from_env())
    result = asyncio.run(orchestrator.analyze_sketch(image_base64))
    _print_analysis(result)

    output_path = _write_json(Path(args.output), result.to_dict())
    print(f"💾 Analysis saved: {output_path}")

    if args.save_project:
        store = ProjectStore(args.store)
        project_id = store.save_project({
            "name": args.save_project,
            "thumbnail": image_base64,
            "visionAnalysis": result.vision_analysis.to_payload(),
            "layoutAnalysis": result.layout_analysis.to_payload(),
            "suggestions": [suggestion.to_dict() for suggestion in result.component_suggestions],
        })
        print(f"📁 Project saved: {project_id}")

    return 0


def cmd_generate(args):
    """Generate a site from an analysis file or a components file."""
    print("🚀 Generating code...")

    if args.components:
        components = json.loads(Path(args.components).read_text(encoding="utf-8"))
        layout = None
    else:
        data = _load_analysis(Path(args.analysis))
        analysis = SketchAnalysis.model_validate(data["fullAnalysis"])
        components = [
            component_to_dict(component)
            for component in accept_suggestions(analysis, min_confidence=args.min_confidence, skip=args.skip)
        ]
        layout = data.get("layoutAnalysis")

    if not components:
        print("❌ Error: No components to generate")
        return 1
    print(f"🧩 Components: {len(components)}")

    orchestrator = SketchOrchestrator(Settings.from_env())
    result = asyncio.run(orchestrator.generate_code(components, layout))

    paths = ArtifactManager(args.output).save_site(args.site_id, result, title=args.title)
    _print_generation(result, paths)
    return 0 if result.complete else 2


async def _build_site(orchestrator, image_base64, min_confidence):
    """Run both pipelines inside one event loop."""
    analysis = await orchestrator.analyze_sketch(image_base64)
    _print_analysis(analysis)
    if analysis.status != AnalysisStatus.SUCCESS:
        return analysis, [], None

    components = accept_suggestions(analysis.full_analysis, min_confidence=min_confidence)
    if not components:
        return analysis, [], None

    print(f"\n🚀 Generating code for {len(components)} components...")
    result = await orchestrator.generate_code(components, analysis.layout_analysis)
    return analysis, components, result


def cmd_build(args):
    """Analyze a sketch, accept suggestions and generate the site."""
    print("🏗️  Building site from sketch...")

    sketch_path = Path(args.sketch)
    if not sketch_path.exists():
        print(f"❌ Error: Sketch not found: {sketch_path}")
        return 1

    image_base64 = SketchLoader(max_edge=args.max_edge).load_base64(sketch_path)
    orchestrator = SketchOrchestrator(Settings.from_env())
    site_id = args.site_id or sketch_path.stem

    analysis, components, result = asyncio.run(_build_site(orchestrator, image_base64, args.min_confidence))
    if analysis.status != AnalysisStatus.SUCCESS:
        print("❌ Analysis incomplete; not generating code")
        return 2
    if result is None:
        print("❌ Error: No suggestions above the confidence threshold")
        return 1

    manager = ArtifactManager(args.output)
    paths = manager.save_site(site_id, result, title=args.title)
    _write_json(manager.output_dir / site_id / "analysis.json", analysis.to_dict())
    _print_generation(result, paths)

    if args.save_project:
        store = ProjectStore(args.store)
        project_id = store.save_project({
            "name": args.save_project,
            "thumbnail": image_base64,
            "visionAnalysis": analysis.vision_analysis.to_payload(),
            "layoutAnalysis": analysis.layout_analysis.to_payload(),
            "suggestions": [suggestion.to_dict() for suggestion in analysis.component_suggestions],
            "components": [component_to_dict(component) for component in components],
            "html": result.html,
            "css": result.css,
            "javascript": result.javascript,
        })
        print(f"📁 Project saved: {project_id}")

    return 0 if result.complete else 2


def cmd_refine(args):
    """Ask for detailed properties of one component type."""
    data = _load_analysis(Path(args.analysis))
    orchestrator = SketchOrchestrator(Settings.from_env())

    print(f"✨ Refining {args.type} component...")
    refinement = asyncio.run(orchestrator.refine_component(data["fullAnalysis"], args.type))
    print(json.dumps(refinement, indent=2, ensure_ascii=False))
    return 0


def cmd_projects(args):
    """List, show or delete saved projects."""
    store = ProjectStore(args.store)

    if args.action == "list":
        projects = store.list_projects()
        if not projects:
            print("📭 No saved projects")
            return 0
        for project in projects:
            print(f"📁 {project['id']}  {project.get('name', '')}  (updated {project.get('updatedAt', '?')})")
        info = store.storage_info()
        print(f"\n💾 {info['projectCount']} projects, {info['used']:,} bytes")
        return 0

    if not args.project_id:
        print(f"❌ Error: '{args.action}' needs a project id")
        return 1

    if args.action == "show":
        project = store.load_project(args.project_id)
        if project is None:
            print(f"❌ Error: Project not found: {args.project_id}")
            return 1
        project.pop("thumbnail", None)
        print(json.dumps(project, indent=2, ensure_ascii=False))
        return 0

    if args.action == "delete":
        if not store.delete_project(args.project_id):
            print(f"❌ Error: Project not found: {args.project_id}")
            return 1
        print(f"🗑️  Deleted {args.project_id}")
        return 0

    return 1


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Turn hand-drawn website sketches into HTML, CSS and JavaScript",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Analyze a sketch image")
    analyze_parser.add_argument("--sketch", "-s", required=True, help="Path to sketch image")
    analyze_parser.add_argument("--output", "-o", default="outputs/analysis.json", help="Analysis JSON path")
    analyze_parser.add_argument("--max-edge", type=int, default=2048, help="Downscale sketch to this edge (px)")
    analyze_parser.add_argument("--save-project", metavar="NAME", help="Also save as a named project")
    analyze_parser.add_argument("--store", default=".sketch2site/projects", help="Project store directory")

    # Generate command
    gen_parser = subparsers.add_parser("generate", help="Generate code from an analysis")
    source = gen_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--analysis", "-a", help="Analysis JSON written by 'analyze'")
    source.add_argument("--components", "-c", help="JSON list of component records")
    gen_parser.add_argument("--output", "-o", default="outputs", help="Output directory")
    gen_parser.add_argument("--site-id", default="site", help="Site directory name")
    gen_parser.add_argument("--title", default="Website", help="Document title")
    gen_parser.add_argument("--min-confidence", type=float, default=0.0, help="Reject suggestions below this")
    gen_parser.add_argument("--skip", type=int, nargs="*", default=[], help="Suggestion indices to reject")

    # Build command
    build_parser = subparsers.add_parser("build", help="Analyze and generate in one step")
    build_parser.add_argument("--sketch", "-s", required=True, help="Path to sketch image")
    build_parser.add_argument("--output", "-o", default="outputs", help="Output directory")
    build_parser.add_argument("--site-id", help="Site directory name (default: from filename)")
    build_parser.add_argument("--title", default="Website", help="Document title")
    build_parser.add_argument("--min-confidence", type=float, default=0.5, help="Reject suggestions below this")
    build_parser.add_argument("--max-edge", type=int, default=2048, help="Downscale sketch to this edge (px)")
    build_parser.add_argument("--save-project", metavar="NAME", help="Also save as a named project")
    build_parser.add_argument("--store", default=".sketch2site/projects", help="Project store directory")

    # Refine command
    refine_parser = subparsers.add_parser("refine", help="Refine one component type")
    refine_parser.add_argument("--analysis", "-a", required=True, help="Analysis JSON written by 'analyze'")
    refine_parser.add_argument("--type", "-t", required=True, help="Component type to refine")

    # Projects command
    projects_parser = subparsers.add_parser("projects", help="Manage saved projects")
    projects_parser.add_argument("action", choices=["list", "show", "delete"])
    projects_parser.add_argument("project_id", nargs="?", help="Project id (show/delete)")
    projects_parser.add_argument("--store", default=".sketch2site/projects", help="Project store directory")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "analyze":
            return cmd_analyze(args)
        elif args.command == "generate":
            return cmd_generate(args)
        elif args.command == "build":
            return cmd_build(args)
        elif args.command == "refine":
            return cmd_refine(args)
        elif args.command == "projects":
            return cmd_projects(args)
    except ServiceUnavailable as e:
        print(f"❌ Service unavailable: {e}")
        return 1
    except AgentError as e:
        _print_agent_error(e)
        return 1
    except KeyboardInterrupt:
        print("\n\n⚠️  Interrupted by user")
        return 130
    except Exception as e:
        print(f"\n❌ Error: {str(e)}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
