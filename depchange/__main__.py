import argparse
import sys


def main():
    """ Entrypoint when is installed via pip """
    parser = argparse.ArgumentParser(
        prog="depchange",
        description="Compare the resolved dependency trees of two releases.",
    )
    parser.add_argument("old", help="snapshot of the previous release (.json or .toml)")
    parser.add_argument("new", help="snapshot of the new release (.json or .toml)")
    parser.add_argument("--print", dest="plain", action="store_true",
                        help="print the report instead of opening the viewer")
    args = parser.parse_args()

    if args.plain:
        from depchange.core.compare import diff_trees
        from depchange.report import format_report
        from depchange.sources import load_tree

        old_root = load_tree(args.old)
        new_root = load_tree(args.new)
        print(format_report(old_root, new_root, diff_trees(old_root, new_root)))
        return 0

    from depchange.app import ChangeReportApp

    app = ChangeReportApp(args.old, args.new)
    app.run()
    return 0

# Development mode
if __name__ == "__main__":
    sys.exit(main())
