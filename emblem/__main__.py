import argparse
import logging
import sys
import time

from .compiler import EmblemCompiler
from .config import load_config
from .errors import ConfigError
from .watcher import run_watcher, trigger_recompile

logger = logging.getLogger("emblem")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
                        prog='emblem',
                        description='Compile Emblem templates to Handlebars and recompile them on change.')
    parser.add_argument('config', help='YAML build file listing src/dst pairs')
    parser.add_argument('--once', action='store_true', help='compile once and exit instead of watching')
    parser.add_argument('-v', '--verbose', action='store_true', help='log compiler debug output')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    if args.once:
        try:
            cfg = load_config(args.config)
        except ConfigError as e:
            logger.error("%s", e)
            return 2
        failures = trigger_recompile(cfg.write_pairs, EmblemCompiler(cfg.options))
        return 1 if failures else 0

    while True:
        try:
            cfg = load_config(args.config)
            compiler = EmblemCompiler(cfg.options)
            trigger_recompile(cfg.write_pairs, compiler)
            run_watcher(cfg.write_pairs, cfg.watch_paths, compiler)
            return 0
        except ConfigError as e:
            logger.error("Error: %s", e)
            logger.error("Please check your configuration and try again, attempting to reload in 3 seconds...")
            time.sleep(3)


if __name__ == '__main__':
    sys.exit(main())
