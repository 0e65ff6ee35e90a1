"""
Command line interface for Mixxx to Rekordbox

Exports a Mixxx library database as a Rekordbox XML collection, remapping
track locations from the Mixxx machine's music folder to the Rekordbox one.
"""

import argparse
import os
import sys
from typing import Any, Dict

from tqdm import tqdm

from .. import __version__
from ..core.engine import export_library_file
from ..core.exceptions import Mixxx2RekordboxError
from ..rekordbox.xml_parser import RekordboxXMLParser
from ..utils.filesystem import write_export_file
from ..utils.logging_config import setup_logging, get_logger
from .config import CLIConfig
from .config_validator import validate_export_request


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser"""
    parser = argparse.ArgumentParser(
        prog='mixxx2rekordbox',
        description="Export a Mixxx library to a Rekordbox XML collection",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mixxx2rekordbox ~/.mixxx/mixxxdb.sqlite --old-base C:/Music --new-base /Volumes/USB/Music
  mixxx2rekordbox mixxxdb.sqlite --old-base /home/dj/Music --new-base /Users/dj/Music --no-crates -o export/
        """
    )

    parser.add_argument('database', nargs='?',
                        help='Mixxx database file (mixxxdb.sqlite)')

    path_group = parser.add_argument_group('Path Remapping')
    path_group.add_argument('--old-base', metavar='PATH',
                            help='Music folder as stored in Mixxx')
    path_group.add_argument('--new-base', metavar='PATH',
                            help='Music folder to write into the Rekordbox collection')

    content_group = parser.add_argument_group('Content')
    content_group.add_argument('--no-playlists', action='store_false', dest='include_playlists', default=None,
                               help='Do not export Mixxx playlists')
    content_group.add_argument('--no-crates', action='store_false', dest='include_crates', default=None,
                               help='Do not export Mixxx crates')

    output_group = parser.add_argument_group('Output')
    output_group.add_argument('--output', '-o', metavar='FILE',
                              help='Output file or directory (default: rekordbox_export.xml)')
    output_group.add_argument('--verify', action='store_true',
                              help='Read the written file back and print a summary')
    output_group.add_argument('--no-progress', action='store_true',
                              help='Hide the progress bar')

    logging_group = parser.add_argument_group('Logging Options')
    logging_group.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                               help='Console logging level')
    logging_group.add_argument('--log-dir', metavar='DIR',
                               help='Directory for the rotating log file')

    parser.add_argument('--config', metavar='FILE',
                        help='JSON configuration file')
    parser.add_argument('--version', action='version', version=f'mixxx2rekordbox {__version__}')

    return parser


def resolve_options(args, config: Dict[str, Any]) -> Dict[str, Any]:
    """Command line values win over configuration values"""
    export = config.get('export', {})
    app = config.get('app', {})

    def pick(value, fallback):
        return fallback if value is None else value

    return {
        'database': args.database,
        'old_base': pick(args.old_base, export.get('old_base')),
        'new_base': pick(args.new_base, export.get('new_base')),
        'include_playlists': pick(args.include_playlists, export.get('include_playlists', True)),
        'include_crates': pick(args.include_crates, export.get('include_crates', True)),
        'output_path': pick(args.output, export.get('output_path')),
        'log_level': pick(args.log_level, app.get('log_level', 'INFO')),
        'log_dir': pick(args.log_dir, app.get('log_dir')),
        'debug': bool(app.get('debug', False)),
    }


class ProgressBar:
    """Adapts engine progress callbacks to a tqdm bar"""

    def __init__(self, enabled: bool = True):
        self.bar = tqdm(total=100, desc="Exporting", unit='%', disable=not enabled,
                        bar_format='{desc}: {percentage:3.0f}%|{bar}| {postfix}')

    def __call__(self, percent: int, message: str):
        self.bar.update(max(0, percent - self.bar.n))
        self.bar.set_postfix_str(message)

    def close(self):
        self.bar.close()


def print_verification(path: str) -> RekordboxXMLParser:
    """Parse the written document and print its contents"""
    parser = RekordboxXMLParser().parse(path)

    print("🔍 Verification:")
    print(f"   Tracks: {len(parser.tracks)}")
    print(f"   Position marks: {parser.position_mark_count}")
    print(f"   Playlists/crates: {len(parser.playlists)}")

    dangling = parser.dangling_keys()
    if dangling:
        print(f"   ⚠️  {len(dangling)} playlist entries reference tracks outside the collection")
    return parser


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    config_manager = CLIConfig(args.config)
    options = resolve_options(args, config_manager.load_config())

    export_logger = setup_logging(
        log_dir=options['log_dir'],
        console_level='DEBUG' if options['debug'] else options['log_level'],
    )
    logger = get_logger('cli')

    progress = None
    try:
        request = validate_export_request(
            options['database'],
            options['old_base'],
            options['new_base'],
            options['include_playlists'],
            options['include_crates'],
        )

        progress = ProgressBar(enabled=not args.no_progress)
        result = export_library_file(
            request.database_path,
            request.old_base,
            request.new_base,
            include_playlists=request.include_playlists,
            include_crates=request.include_crates,
            progress_callback=progress,
        )
        progress.close()
        progress = None

        output_path = write_export_file(result, options['output_path'] or result.filename)
        logger.info(f"Wrote {output_path}")
        export_logger.log_export_summary(result.to_dict())

        print(f"✅ Exported {result.tracks_exported} tracks, "
              f"{result.position_marks_exported} position marks, "
              f"{result.playlists_exported} playlists/crates")
        print(f"   Output: {os.path.abspath(output_path)}")
        print(f"   Time: {result.processing_time:.2f}s")

        if args.verify:
            print_verification(output_path)

        return 0

    except Mixxx2RekordboxError as e:
        export_logger.log_error('cli', e, {'database': options['database']})
        print(f"❌ {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n⚠️ Export interrupted by user", file=sys.stderr)
        return 130
    finally:
        if progress is not None:
            progress.close()


if __name__ == '__main__':
    sys.exit(main())
