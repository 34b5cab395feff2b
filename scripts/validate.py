from pathlib import Path
import sys
import argparse
import logging

# Add src to path to allow importing the tracksnap package
sys.path.append(str(Path(__file__).parent.parent / "src"))

from tracksnap import validate_layout_file

def main():
    parser = argparse.ArgumentParser(description="Validate a saved track layout (JSON piece list).")
    parser.add_argument("file", type=str, help="Path to the .json layout file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose output")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    file_path = Path(args.file)
    if not file_path.exists():
        print(f"Error: File {file_path} does not exist.")
        sys.exit(1)

    print(f"Validating {file_path}...")
    result = validate_layout_file(file_path)

    if result.is_valid:
        print(f"✅ PASS: {file_path.name} is valid.")
    else:
        print(f"❌ FAIL: {file_path.name} has {len(result.errors)} errors:")
        for err in result.errors:
            print(f"  - [{err.error_type.upper()}] {err.message}")
            if args.verbose and err.piece_indices:
                print(f"    Affected piece indices: {err.piece_indices}")
        sys.exit(1)

if __name__ == "__main__":
    main()
