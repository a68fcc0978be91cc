#!/usr/bin/env python3
"""
Command-line interface for Scampish.
"""

import sys
import argparse

from . import __version__
from .core import Scampish
from .settings import ScampishSettings


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description='Scampish - Static Site Generator for S3')
    parser.add_argument('--bucket', type=str,
                        help='Content bucket holding sources and templates')
    parser.add_argument('--type', type=str,
                        help='Output target, looked up in the buckets mapping of the site config')
    parser.add_argument('--source-dir', dest='source_dir', type=str,
                        help='Prefix of the content tree inside the bucket')
    parser.add_argument('--base-url', dest='base_url', type=str,
                        help='Base URL the site is served from')
    parser.add_argument('--templates', type=str,
                        help='Prefix of the templates inside the bucket')
    parser.add_argument('--endpoint-url', dest='endpoint_url', type=str,
                        help='S3-compatible endpoint URL')
    parser.add_argument('--log-dir', dest='log_dir', type=str,
                        help='Directory for build log files')
    parser.add_argument('--init', type=str, choices=['yml', 'yaml', 'json'],
                        help='Create a sample configuration file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    args = parser.parse_args()

    settings_loader = ScampishSettings()

    # Handle init command
    if args.init:
        config_path = settings_loader.create_sample_config(args.init)
        print(f"Created sample configuration file: {config_path}")
        return

    try:
        settings_loader.load_settings()

        # Convert argparse Namespace to dict, excluding None values for proper merging
        args_dict = {k: v for k, v in vars(args).items() if v is not None and k != 'init'}

        # Command line arguments take precedence
        final_settings = settings_loader.merge_with_args(args_dict)

        generator = Scampish(
            bucket=final_settings['bucket'],
            target=final_settings['type'],
            source_dir=final_settings['source_dir'],
            base_url=final_settings['base_url'],
            templates_prefix=final_settings['templates'],
            site_config_key=final_settings['site_config'],
            endpoint_url=final_settings['endpoint_url'],
            log_dir=final_settings['log_dir'],
        )

        generator.build()

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
