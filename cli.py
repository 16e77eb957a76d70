#!/usr/bin/env python3
"""
RTL Fix CLI - Command Line Interface

Shape and reorder Arabic/Persian/Urdu text from the shell.

Usage:
    python cli.py fix "مرحبا بالعالم"
    echo "123 عربي" | python cli.py fix --numerals
    python cli.py fix --cache-file rtl_cache.txt "مرحبا"
    python cli.py diagnose
    python cli.py signature --no-ligatures

© 2025 Sven Kalinowski with small help of Lino Casu
Licensed under the Anti-Capitalist Software License v1.4
"""
import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from logging_config import setup_logging
from rtl_config import RTLConfig


def print_banner():
    """Print CLI banner."""
    try:
        print("""
+-----------------------------------------------------------+
|                 RTL Text Fixer - CLI                       |
|     Arabic / Persian / Urdu shaping for LTR renderers      |
+-----------------------------------------------------------+
""")
    except UnicodeEncodeError:
        print("\n=== RTL Text Fixer - CLI ===\n")


def build_config(args) -> RTLConfig:
    """Translate command line flags into a configuration snapshot."""
    options = {
        "convert_to_eastern_arabic_numerals": args.numerals,
        "mirror_brackets": not args.no_mirror,
        "process_multiline_text": not args.no_multiline,
        "enable_performance_metrics": args.metrics,
        "enable_text_trace": args.trace,
    }
    if args.scopes is not None:
        options["ignored_scopes"] = args.scopes
    if args.cache_file:
        options["enable_persistent_cache"] = True
        options["persistent_cache_file"] = str(args.cache_file)
    return RTLConfig(**options)


def write_line(text: str):
    try:
        print(text)
    except UnicodeEncodeError:
        sys.stdout.buffer.write(text.encode("utf-8") + b"\n")
        sys.stdout.flush()


# =============================================================================
# FIX COMMAND
# =============================================================================

def cmd_fix(args):
    """Fix text given as arguments, or each line of stdin."""
    from rtl_processor import RTLProcessor

    config = build_config(args)
    processor = RTLProcessor(config=config)
    use_ligatures = not args.no_ligatures

    if config.enable_persistent_cache:
        processor.load_persistent_cache(Path("."))

    if args.text:
        texts = [" ".join(args.text)]
    else:
        texts = [line.rstrip("\r\n") for line in sys.stdin]

    for text in texts:
        write_line(processor.fix(text, use_ligatures))

    if config.enable_performance_metrics:
        processor.monitor.log_report()

    if config.enable_persistent_cache:
        processor.save_persistent_cache(Path("."))

    return 0


# =============================================================================
# DIAGNOSE COMMAND
# =============================================================================

def cmd_diagnose(args):
    """Run the built-in sample strings through the fixer."""
    from diagnostics import run_diagnostics
    from rtl_processor import RTLProcessor

    result = run_diagnostics(RTLProcessor(config=build_config(args)))

    for case in result.cases:
        status = "OK" if case.passed else "FAILED"
        write_line(f"  [{status}] {case.input_text} -> {case.output_text}")

    print(f"\n{result.passed}/{result.total} checks passed")
    return 0 if result.ok else 1


# =============================================================================
# SIGNATURE COMMAND
# =============================================================================

def cmd_signature(args):
    """Print the cache signature for the given settings."""
    from text_cache import processing_signature

    config = build_config(args)
    print(f"{processing_signature(config, not args.no_ligatures):08X}")
    return 0


# =============================================================================
# MAIN
# =============================================================================

def add_processing_flags(parser: argparse.ArgumentParser):
    parser.add_argument("--no-ligatures", action="store_true", help="Do not fuse Lam-Alef pairs")
    parser.add_argument("--numerals", action="store_true", help="Convert 0-9 to Eastern Arabic digits")
    parser.add_argument("--no-mirror", action="store_true", help="Do not mirror brackets")
    parser.add_argument("--no-multiline", action="store_true", help="Treat input as a single line")
    parser.add_argument("--scopes", help="Delimiter pairs to leave untouched (default: <>{}[])")
    parser.add_argument("--cache-file", type=Path, help="Load and save the result cache here")
    parser.add_argument("--metrics", action="store_true", help="Log a performance report at exit")
    parser.add_argument("--trace", action="store_true", help="Log input/output of every fix (needs -v)")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="RTL Text Fixer - CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python cli.py fix "مرحبا (Hello)"
  python cli.py fix --numerals --no-ligatures < labels.txt
  python cli.py diagnose
  python cli.py signature
"""
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=Path, help="Write a detailed log file")

    subparsers = parser.add_subparsers(dest="command", help="Command")

    # Fix command
    p_fix = subparsers.add_parser("fix", help="Fix text for LTR renderers")
    p_fix.add_argument("text", nargs="*", help="Text to fix (reads stdin when omitted)")
    add_processing_flags(p_fix)
    p_fix.set_defaults(func=cmd_fix)

    # Diagnose command
    p_diag = subparsers.add_parser("diagnose", help="Run the self-check")
    add_processing_flags(p_diag)
    p_diag.set_defaults(func=cmd_diagnose)

    # Signature command
    p_sig = subparsers.add_parser("signature", help="Print the cache signature for a setting set")
    add_processing_flags(p_sig)
    p_sig.set_defaults(func=cmd_signature)

    args = parser.parse_args(argv)

    if not args.command:
        print_banner()
        parser.print_help()
        return 0

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        log_file=args.log_file,
    )

    try:
        return args.func(args)
    except ValidationError as e:
        print(f"[ERROR] Invalid settings: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
