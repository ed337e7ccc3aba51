"""
Command-line interface for Templify.

Usage:
    templify pdf content.json --template ihm-portrait --title "Annual Report"
    templify pdf notes.txt --template ihna-landscape --title "Handbook" --plain
    templify docx content.json --template ihna-portrait --title "Handbook" --subtitle "2026"
    templify templates --brand IHM
    templify layout show portrait
    templify generate "Quarterly safety report" --title "Safety" --output notes.txt
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .config.brands import TEMPLATES, get_template, templates_for_brand
from .config.layout import ORIENTATIONS, LayoutStore, default_layout, merge_layout
from .config.settings import Settings
from .exceptions import TemplifyError
from .models.document import RichDocument
from .models.tiptap import from_tiptap, plain_text_to_document
from .utils.logger import configure_logging
from .version import __version__

DEFAULT_LAYOUT_DIR = Path(".templify")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="templify",
        description="Templify - branded PDF and DOCX reports from rich-text content",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  templify pdf content.json --template ihm-portrait --title "Annual Report"
  templify docx content.txt --template ihna-landscape --title "Handbook"
  templify templates
  templify layout reset landscape
        """,
    )
    parser.add_argument("--version", action="version", version=f"templify {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (("pdf", "Render content to PDF"), ("docx", "Render content into the template's DOCX")):
        export_parser = subparsers.add_parser(name, help=help_text)
        export_parser.add_argument("input", help="Content file: editor JSON (.json) or plain text")
        export_parser.add_argument("-t", "--template", required=True, help="Template id (see 'templify templates')")
        export_parser.add_argument("--title", required=True, help="Document title")
        export_parser.add_argument("--subtitle", help="Document subtitle")
        export_parser.add_argument("-o", "--output", help="Output path (default: generated filename)")
        if name == "pdf":
            export_parser.add_argument(
                "--plain",
                action="store_true",
                help="Plain-text layout: cover page first, headings detected per line",
            )
            export_parser.add_argument(
                "--classify",
                action="store_true",
                help="Label headings with the OpenAI classifier (requires OPENAI_API_KEY)",
            )

    templates_parser = subparsers.add_parser("templates", help="List available templates")
    templates_parser.add_argument("--brand", help="Only templates of this brand")

    layout_parser = subparsers.add_parser("layout", help="Show, save or reset stored layouts")
    layout_parser.add_argument("action", choices=["show", "defaults", "save", "reset"])
    layout_parser.add_argument("orientation", choices=list(ORIENTATIONS))
    layout_parser.add_argument("file", nargs="?", help="Partial layout JSON (for 'save')")

    generate_parser = subparsers.add_parser("generate", help="Generate report content with OpenAI")
    generate_parser.add_argument("prompt", help="What the report should cover")
    generate_parser.add_argument("--title", default="", help="Report title")
    generate_parser.add_argument("--subtitle", default="", help="Report subtitle")
    generate_parser.add_argument("-o", "--output", help="Write content to this file instead of stdout")

    return parser


def load_document(path: Path) -> RichDocument:
    """Read editor JSON or plain text into a RichDocument."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return from_tiptap(json.loads(text))
    return plain_text_to_document(text)


def _layout_store(settings: Settings) -> LayoutStore:
    return LayoutStore(settings.layout_dir or DEFAULT_LAYOUT_DIR)


def cmd_export(args, settings: Settings) -> int:
    """Handle pdf and docx commands."""
    from . import api
    from .services.heading_classifier import OpenAIHeadingClassifier
    from .services.template_source import FileTemplateSource, HttpTemplateSource

    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: File not found: {input_path}", file=sys.stderr)
        return 1

    template = get_template(args.template)
    layout = _layout_store(settings).load(template.orientation)
    if settings.template_dir is not None:
        source = FileTemplateSource(settings.template_dir)
    else:
        source = HttpTemplateSource(settings.template_base_url, settings.http_timeout)

    if args.command == "docx":
        result = api.export_word(template, load_document(input_path), args.title, args.subtitle, layout, source)
    elif args.plain:
        classifier = None
        if args.classify and settings.has_openai:
            classifier = OpenAIHeadingClassifier(settings.openai_api_key, settings.model)
        content = input_path.read_text(encoding="utf-8")
        result = api.export_plain_pdf(template, content, args.title, args.subtitle, layout, source, classifier)
    else:
        result = api.export_pdf(template, load_document(input_path), args.title, args.subtitle, layout, source)

    output_path = Path(args.output) if args.output else Path(result.filename)
    output_path.write_bytes(result.data)
    print(f"✅ Saved: {output_path}")
    return 0


def cmd_templates(args, settings: Settings) -> int:
    templates = templates_for_brand(args.brand) if args.brand else TEMPLATES
    for template in templates:
        formats = "pdf, docx" if template.docx_url else "pdf"
        print(f"{template.id:<16} {template.brand:<5} {template.orientation:<10} {formats}")
    return 0


def cmd_layout(args, settings: Settings) -> int:
    store = _layout_store(settings)
    if args.action == "show":
        print(json.dumps(store.load(args.orientation).to_dict(), indent=2))
    elif args.action == "defaults":
        print(json.dumps(default_layout(args.orientation).to_dict(), indent=2))
    elif args.action == "reset":
        store.reset(args.orientation)
        print(f"Reset {args.orientation} layout to defaults")
    else:
        if not args.file:
            print("Error: 'layout save' needs a JSON file", file=sys.stderr)
            return 1
        partial = json.loads(Path(args.file).read_text(encoding="utf-8"))
        path = store.save(args.orientation, merge_layout(store.load(args.orientation), partial))
        print(f"✅ Saved: {path}")
    return 0


def cmd_generate(args, settings: Settings) -> int:
    from .services.content_generator import OpenAIContentGenerator

    generator = OpenAIContentGenerator(settings.openai_api_key, settings.model)
    content = generator.generate(args.prompt, args.title, args.subtitle)
    if args.output:
        Path(args.output).write_text(content + "\n", encoding="utf-8")
        print(f"✅ Saved: {args.output}")
    else:
        print(content)
    return 0


COMMANDS = {
    "pdf": cmd_export,
    "docx": cmd_export,
    "templates": cmd_templates,
    "layout": cmd_layout,
    "generate": cmd_generate,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging("DEBUG" if args.verbose else "WARNING")
    try:
        settings = Settings.from_env()
        return COMMANDS[args.command](args, settings)
    except TemplifyError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
