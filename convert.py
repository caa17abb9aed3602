import argparse
import sys
from typing import List, Optional

from sb2import.diagnostics import DiagnosticCollector, DiagnosticContext
from sb2import.errors import ProjectImportError
from sb2import.project_io import convert_sb2_to_sb3


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert a Scratch 2.0 .sb2 project into a Scratch 3.0 .sb3 project.")
    parser.add_argument("input", help="Path to the .sb2 archive or its project.json")
    parser.add_argument("output", nargs="?", default="output.sb3", help="Output .sb3 path, or a .json path to write only project.json")
    parser.add_argument("--sprite", action="store_true", help="Treat the input as a single exported sprite (.sprite2)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    diag_ctx = DiagnosticContext()
    diag_collector = DiagnosticCollector()

    try:
        convert_sb2_to_sb3(args.input, args.output, force_sprite=args.sprite, diagnostics=diag_ctx)
    except ProjectImportError as exc:
        print(f"Error: {exc}")
        return 1

    diag_collector.add_context_diagnostics(diag_ctx)
    if diag_collector.all_diagnostics:
        print()  # Blank line before diagnostics
        diag_collector.print_all()
        print()  # Blank line after diagnostics
        print(f"Conversion completed with {diag_collector.summary()}")
    else:
        print(f"Successfully converted {args.input} to {args.output}")
    return 1 if diag_collector.has_errors() else 0


if __name__ == "__main__":
    sys.exit(main())
