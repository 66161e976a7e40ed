#!/usr/bin/env python3
"""
SitePlace CLI

Command-line interface for analysing exported site layout snapshots.

Usage:
    siteplace analyze <scene.yaml> [options]
    siteplace topology <scene.yaml> [options]
    siteplace report <scene.yaml> [options]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional


def load_scene_from_path(scene_arg: str):
    """
    Load a scene snapshot, reporting problems on stderr.

    Returns:
        Scene or None if the file could not be loaded
    """
    from .scene.loader import SceneFormatError, load_scene

    path = Path(scene_arg)
    try:
        return load_scene(path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
    except SceneFormatError as e:
        print(f"Error: Invalid scene file: {e}", file=sys.stderr)
    return None


def _get_profile(args):
    from .rules.profiles import get_profile

    return get_profile(args.profile) if args.profile else get_profile()


def _get_patterns(args):
    from .patterns import get_patterns

    return get_patterns(args.patterns) if getattr(args, 'patterns', None) else None


def cmd_analyze(args):
    """Run all analysis passes and print the annotations."""
    from .engine import recompute

    scene = load_scene_from_path(args.scene)
    if scene is None:
        return 1

    annotations = recompute(scene.objects, args.rule_profile, args.equipment_patterns)

    if args.json:
        print(json.dumps(annotations.to_dict(), indent=2))
    else:
        print(f"Scene: {scene.name} ({len(scene)} objects)")
        print()
        print(annotations.summary())
    return 0


def cmd_topology(args):
    """Infer and print the electrical topology."""
    from .electrical.topology import infer_topology

    scene = load_scene_from_path(args.scene)
    if scene is None:
        return 1

    topology = infer_topology(scene.objects, args.rule_profile, args.equipment_patterns)

    if args.json:
        print(json.dumps(topology.to_dict(), indent=2))
    else:
        print(topology.summary())
    return 0 if topology.is_plausible else 1


def cmd_report(args):
    """Generate the site advisor report."""
    from .validation.advisor import SiteAdvisor

    scene = load_scene_from_path(args.scene)
    if scene is None:
        return 1

    advisor = SiteAdvisor(args.rule_profile, args.equipment_patterns)
    report = advisor.assess(scene.objects)

    content = report.to_markdown() if args.markdown else report.summary()

    if args.output:
        Path(args.output).write_text(content)
        print(f"Report saved to: {args.output}")
    else:
        print(content)

    return 1 if report.has_errors() else 0


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="SitePlace - Site Layout Compliance Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  siteplace analyze farm.yaml
  siteplace analyze farm.json --json
  siteplace topology farm.yaml
  siteplace report farm.yaml --markdown -o report.md
        """,
    )

    parser.add_argument('--version', action='version', version='siteplace 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    def add_common(sub):
        sub.add_argument('scene', help='Path to scene snapshot (YAML or JSON)')
        sub.add_argument('--profile', help='Rule profile (default: site_standard)')
        sub.add_argument('--patterns', help='Custom equipment patterns YAML file')
        sub.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    # Analyze command
    analyze_parser = subparsers.add_parser('analyze', help='Alignment, spacing and topology')
    add_common(analyze_parser)
    analyze_parser.add_argument('--json', action='store_true', help='Print annotations as JSON')

    # Topology command
    topology_parser = subparsers.add_parser('topology', help='Infer electrical topology')
    add_common(topology_parser)
    topology_parser.add_argument('--json', action='store_true', help='Print topology as JSON')

    # Report command
    report_parser = subparsers.add_parser('report', help='Generate site advisor report')
    add_common(report_parser)
    report_parser.add_argument('--markdown', action='store_true', help='Markdown output')
    report_parser.add_argument('-o', '--output', help='Save report to file')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    )

    try:
        args.rule_profile = _get_profile(args)
        args.equipment_patterns = _get_patterns(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # Dispatch command
    commands = {
        'analyze': cmd_analyze,
        'topology': cmd_topology,
        'report': cmd_report,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
