"""
Horadric - Command Line
Loads the game tables and prints calculator results as JSON.

Usage:
    python main.py runeword Insight
    python main.py skeleton 20 --mastery 15 --resist 10 --aura Might=12
    python main.py mage 20 --life-strategy ten_minus_21
    python main.py blood-golem 20 --mastery 5
    python main.py iron-golem 20 "Thresher" --runeword Infinity --clvl 90 --ethereal
    python main.py item-level --clvl 90 --mlvl 85
    python main.py affix-level --ilvl 90 --qlvl 65
    python main.py mf 300
    python main.py --debug stats
"""

import sys
import os
import json
import logging
import argparse
from typing import Dict, List

# Add src to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import (
    APP_VERSION,
    LOG_LEVEL,
    LOG_FILE,
)
from core import SummonEngine
from display import runeword_specific_stats, summon_sections
from games.d2 import create_d2_config
from summon_formulas import apply_affix_formula, calculate_effective_mf, calculate_item_level

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False):
    """Configure logging.

    Console gets LOG_LEVEL and goes to stderr so stdout stays valid JSON.
    File gets DEBUG when --debug is used.
    """
    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.DEBUG if debug else getattr(logging, LOG_LEVEL.upper(), logging.INFO))
    console.setFormatter(logging.Formatter("%(asctime)s %(message)s", datefmt="%H:%M:%S"))

    file_handler = logging.FileHandler(LOG_FILE, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    root_logger.addHandler(console)
    root_logger.addHandler(file_handler)


def parse_auras(values: List[str]) -> Dict[str, int]:
    """["Might=12", "Fanaticism=20"] → {"Might": 12, "Fanaticism": 20}"""
    auras = {}
    for value in values or []:
        name, sep, level = value.partition("=")
        if not sep:
            raise argparse.ArgumentTypeError(f"aura must be NAME=LEVEL, got {value!r}")
        try:
            auras[name.strip()] = int(level)
        except ValueError:
            raise argparse.ArgumentTypeError(f"aura level must be a number, got {level!r}")
    return auras


def runeword_record(rw) -> dict:
    return {
        "name": rw.name,
        "image_url": rw.image_url,
        "runes": list(rw.rune_sequence),
        "sockets": rw.socket_count,
        "categories": sorted(rw.compatible_item_categories),
        "stats": [{"label": label, "key": key} for label, key in rw.key_map.items()],
        "specific_stats": [label for label, _ in runeword_specific_stats(rw)],
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=f"Horadric {APP_VERSION} - summon and rune word calculator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py skeleton 20 --mastery 15 --aura Might=12
  python main.py iron-golem 20 Thresher --runeword Infinity --clvl 90
        """
    )
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--source", help="Data directory or http(s) base URL")
    parser.add_argument("--sections", action="store_true",
                        help="Print summon results grouped into display sections")

    sub = parser.add_subparsers(dest="command", required=True)

    rw = sub.add_parser("runeword", help="Show a parsed rune word")
    rw.add_argument("name")

    sub.add_parser("stats", help="Show what was loaded")

    def summon_args(p):
        p.add_argument("level", type=int, help="Summon skill level")
        p.add_argument("--mastery", type=int, default=0, help="Mastery skill level")
        p.add_argument("--resist", type=int, default=0, help="Summon Resist level")
        p.add_argument("--aura", action="append", default=[], metavar="NAME=LEVEL",
                       help="External aura level (repeatable)")

    summon_args(sub.add_parser("skeleton", help="Raise Skeleton"))
    mage = sub.add_parser("mage", help="Raise Skeletal Mage")
    summon_args(mage)
    mage.add_argument("--life-strategy", help="fifty_per_level or ten_minus_21")
    summon_args(sub.add_parser("blood-golem", help="Blood Golem"))

    iron = sub.add_parser("iron-golem", help="Iron Golem")
    summon_args(iron)
    iron.add_argument("weapon", help="Base weapon name")
    iron.add_argument("--category", help="Weapon category when the name is ambiguous")
    iron.add_argument("--runeword", help="Rune word in the weapon")
    iron.add_argument("--clvl", type=int, default=0, help="Character level")
    iron.add_argument("--ethereal", action="store_true")

    ilvl = sub.add_parser("item-level", help="Solve ilvl = round(clvl/2 + mlvl/2)")
    ilvl.add_argument("--clvl", type=int)
    ilvl.add_argument("--mlvl", type=int)
    ilvl.add_argument("--ilvl", type=int)

    alvl = sub.add_parser("affix-level", help="Solve the affix level formula")
    alvl.add_argument("--ilvl", type=int)
    alvl.add_argument("--qlvl", type=int)
    alvl.add_argument("--alvl", type=int)

    mf = sub.add_parser("mf", help="Effective Magic Find per item quality")
    mf.add_argument("raw_mf", help="Magic Find from gear")
    return parser


def run(args) -> object:
    """Execute one command; returns a JSON-ready record or None."""
    if args.command == "item-level":
        return calculate_item_level(args.clvl, args.mlvl, args.ilvl)
    if args.command == "affix-level":
        return apply_affix_formula(args.ilvl, args.qlvl, args.alvl)
    if args.command == "mf":
        return calculate_effective_mf(args.raw_mf)

    engine = SummonEngine(create_d2_config(data_source=args.source))
    if not engine.initialize():
        logger.warning("Engine not fully loaded, results may be missing")

    if args.command == "stats":
        return engine.stats()
    if args.command == "runeword":
        rw = engine.runeword(args.name)
        return runeword_record(rw) if rw else None

    auras = parse_auras(args.aura)
    if args.command == "skeleton":
        result = engine.skeleton(args.level, args.mastery, args.resist, auras)
    elif args.command == "mage":
        result = engine.skeleton_mage(args.level, args.mastery, args.resist, auras,
                                      life_strategy=args.life_strategy)
    elif args.command == "blood-golem":
        result = engine.blood_golem(args.level, args.mastery, args.resist, auras)
    else:
        result = engine.iron_golem(
            args.level, args.weapon, runeword=args.runeword, category=args.category,
            mastery_level=args.mastery, resist_level=args.resist, auras=auras,
            character_level=args.clvl, ethereal=args.ethereal,
        )

    if result is None:
        return None
    if args.sections:
        return [{"title": title, "rows": [[label, value] for label, value in rows]}
                for title, rows in summon_sections(result)]
    return result.as_dict()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(debug=args.debug)

    try:
        record = run(args)
    except (ValueError, argparse.ArgumentTypeError) as e:
        parser.error(str(e))
        return
    except Exception as e:
        logger.critical(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    if record is None:
        logger.error("Nothing to show (see warnings above)")
        sys.exit(2)
    print(json.dumps(record, indent=2))


if __name__ == "__main__":
    main()
