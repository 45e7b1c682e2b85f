"""
Main entry point for the bubble chart label placer.
Provides both command-line interface and example usage.
"""

import argparse
import json
import sys
import time

from bubble_chart import BubbleChartGenerator, example_records, load_records
from bubble_sizing import Category
from config import OUTPUT_CONFIG


def parse_arguments(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Bubble Chart Label Placer - Place collision-free labels and leader lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Lay out the built-in example dataset and save a preview
  python main.py --example --output bubble_chart.png

  # Lay out records from a JSON file and print the placements
  python main.py --input records.json --json

  # Use a custom canvas size and never draw leader lines
  python main.py --input records.json --canvas-size 1920 1080 --policy disabled

  # Keep looking for leader line attachments further out before giving up
  python main.py --input records.json --policy persistent --output chart.png

  # Scale bubbles linearly instead of by revenue buckets
  python main.py --input records.json --size-mapping linear --output chart.png

  # List categories
  python main.py --list-categories
""",
    )

    # Input options
    input_group = parser.add_argument_group("Input Options")
    input_group.add_argument(
        "--input",
        "-i",
        type=str,
        help="JSON file with a list of records (label, x, y, magnitude, category)",
    )
    input_group.add_argument(
        "--example", action="store_true", help="Use the built-in example dataset"
    )

    # Placement options
    placement_group = parser.add_argument_group("Placement Options")
    placement_group.add_argument(
        "--policy",
        type=str,
        choices=["eager", "persistent", "disabled"],
        help="Leader line attachment policy (default from config)",
    )
    placement_group.add_argument(
        "--size-mapping",
        type=str,
        choices=["step", "linear"],
        help="Magnitude to bubble radius mapping (default from config)",
    )
    placement_group.add_argument(
        "--canvas-size",
        nargs=2,
        type=int,
        metavar=("WIDTH", "HEIGHT"),
        help="Canvas size in pixels (default: 1200x700)",
    )
    placement_group.add_argument(
        "--max-radial-steps",
        type=int,
        help="Ceiling on radial escalations per label",
    )

    # Output options
    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--output", "-o", type=str, help="Save a PNG preview to the specified path"
    )
    output_group.add_argument(
        "--json", action="store_true", help="Print placements in JSON format"
    )
    output_group.add_argument(
        "--quiet", "-q", action="store_true", help="Minimal output"
    )
    output_group.add_argument(
        "--debug", action="store_true", help="Trace every placement candidate"
    )
    output_group.add_argument(
        "--list-categories", action="store_true", help="List record categories"
    )

    return parser.parse_args(argv)


def print_layout(layout) -> None:
    """Print a table of label placements."""
    print("\nLabel placements:")
    print("-" * 72)
    for position, bubble in enumerate(layout.bubbles):
        result = layout.run.by_index()[position]
        if result.has_leader_line:
            line = f"line from ({result.attachment.x:.1f}, {result.attachment.y:.1f})"
        else:
            line = "no line"
        print(
            f"{bubble.record.label[:24]:24s} "
            f"({result.rectangle.min_x:7.1f}, {result.rectangle.min_y:7.1f})  {line}"
        )
    print("-" * 72)


def main(argv=None):
    """Main entry point."""
    args = parse_arguments(argv)

    # Keep stdout clean for JSON consumers
    if args.quiet or args.json:
        OUTPUT_CONFIG["verbose"] = False
    if args.debug:
        OUTPUT_CONFIG["debug"] = True

    if args.list_categories:
        print("\nAvailable categories:")
        print("-" * 40)
        for category in Category:
            print(f"{category.value:4s}: {category.display_name} ({category.color})")
        print("-" * 40)
        return 0

    if not args.input and not args.example:
        print("Error: --input or --example is required")
        return 1

    try:
        records = example_records() if args.example else load_records(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    width, height = args.canvas_size if args.canvas_size else (None, None)
    placer_options = {}
    if args.max_radial_steps is not None:
        placer_options["max_radial_steps"] = args.max_radial_steps

    start_time = time.time()

    try:
        generator = BubbleChartGenerator(
            width=width,
            height=height,
            policy=args.policy,
            size_mapping=args.size_mapping,
            **placer_options,
        )
        layout = generator.generate(records, output_path=args.output)
    except ImportError as e:
        print(f"Error: {e}")
        print("Install required packages: pip install Pillow matplotlib numpy")
        return 1
    except ValueError as e:
        print(f"Error creating bubble chart: {e}")
        return 1

    if args.json:
        print(json.dumps(layout.to_dict(), indent=2))
    elif OUTPUT_CONFIG["verbose"]:
        print_layout(layout)

    if OUTPUT_CONFIG["verbose"]:
        elapsed = round(time.time() - start_time, 2)
        print(f"\nCompleted layout in {elapsed} seconds")

    return 0


def example_usage():
    """Example of programmatic usage."""
    generator = BubbleChartGenerator()

    print("Example: Placing labels for the built-in dataset")
    layout = generator.generate(example_records())
    print_layout(layout)


if __name__ == "__main__":
    # Check if running with arguments
    if len(sys.argv) > 1:
        sys.exit(main())
    else:
        # Run example if no arguments provided
        print("No arguments provided. Running example usage...\n")
        example_usage()
        print("\n\nFor command-line usage, run: python main.py --help")
