"""Headless Overlay Preview: CLI entry point.

Loads an overlay layout JSON, expands every slot list placeholder using the
template store, and prints the resulting render list (back to front) as JSON.
With a live data file, visibility bindings and slot compaction are resolved
against it and data displays report the text they would show.

Usage:
    overlay-headless <layout_file> [--templates FILE] [--data FILE] [-o OUT] [-v]
    python editor/src/headless.py <layout_file> ...

Examples:
    overlay-headless layouts/hockey.json
    overlay-headless layouts/hockey.json --data samples/period2.json -o render.json
    overlay-headless layouts/hockey.json --templates my_templates.json --export-layout
"""

import sys
import os
import json
import argparse
import logging

# Add editor/src to path so imports work when run as a script
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from constants import DATA_DISPLAY_KINDS, KIND_DYNAMIC_LIST
from utils.data_binding import display_text
from utils.logger import loggerRaise

logger = logging.getLogger('headless')


def render_entry_to_dict(entry, data=None) -> dict:
    """Describe one render entry for JSON output.

    Args:
        entry: RenderEntry from the scene's render list.
        data: Live data object, or None.

    Returns:
        Dict with the node's id, type, geometry, ordering key, visibility
        and (for data displays) the formatted text.
    """
    node = entry.node
    result = {
        'id': node.id,
        'type': node.kind,
        'name': node.display_name,
        'effectiveLayer': entry.effective_layer,
        'isVisible': entry.is_visible,
        'opacityBinding': entry.opacity_binding,
        'position': {'x': node.position.x, 'y': node.position.y},
        'size': {'width': node.size.width, 'height': node.size.height},
    }
    if node.slot is not None:
        result['slot'] = node.slot
    if node.data_binding is not None:
        result['dataPath'] = node.data_binding
    if node.kind in DATA_DISPLAY_KINDS:
        props = node.props
        result['text'] = display_text(data, node.data_binding, props.format, props.prefix, props.suffix)
    elif node.kind == KIND_DYNAMIC_LIST:
        total, active = node.props.resolve_counts(data)
        result['counts'] = {'total': total, 'active': active}
    return result


def build_parser() -> argparse.ArgumentParser:
    from version import get_version

    parser = argparse.ArgumentParser(
        description='Expand an overlay layout and print its render list (headless).',
    )
    parser.add_argument(
        'layout_file',
        help='Path to the layout JSON file.',
    )
    parser.add_argument(
        '-t', '--templates',
        default=None,
        help='Template store file (default: templates.json in the config directory).',
    )
    parser.add_argument(
        '-d', '--data',
        default=None,
        help='Live data JSON used for bindings and slot compaction.',
    )
    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Write JSON to this file instead of stdout.',
    )
    parser.add_argument(
        '--export-layout',
        action='store_true',
        help='Output the expanded layout instead of the render list.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {get_version()}',
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    layout_path = os.path.abspath(args.layout_file)
    if not os.path.isfile(layout_path):
        print(f"Error: Layout file not found: {layout_path}", file=sys.stderr)
        return 1
    if args.data and not os.path.isfile(args.data):
        print(f"Error: Data file not found: {os.path.abspath(args.data)}", file=sys.stderr)
        return 1

    from models.scene import Scene
    from services.editor_session import EditorSession
    from services.file_operations import load_layout_from_file, load_data_from_file, save_json_to_file
    from services.template_store import TemplateStore

    try:
        layout = load_layout_from_file(layout_path)
        data = load_data_from_file(args.data) if args.data else None
        scene = Scene.from_layout_dict(layout)
    except (OSError, ValueError) as e:
        logger.error(f"Error loading input files: {e}")
        print(f"Error: Could not load input files: {e}", file=sys.stderr)
        return 1

    session = EditorSession(scene, store=TemplateStore(args.templates))
    logger.debug(f"Loaded '{scene.name}': {scene.get_node_count()} nodes")

    if args.export_layout:
        output = session.export_layout(expand=True, data=data)
    else:
        output = [render_entry_to_dict(entry, data) for entry in session.preview(data)]

    if args.output:
        try:
            save_json_to_file(output, args.output)
        except OSError as e:
            loggerRaise(e, f"Error writing {args.output}")
    else:
        json.dump(output, sys.stdout, indent=2)
        sys.stdout.write('\n')
    return 0


if __name__ == '__main__':
    sys.exit(main())
