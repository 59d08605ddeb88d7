#!/usr/bin/env python3
"""
OntoSat — saturate an OWL ontology with the existentials its role assertions imply.

For each role assertion r(x,y) and each class C of y, x gets `r some C`
(assertional mode) or a class `rC ≡ r some C` is added (terminological mode).
Chains r(x,y), s(y,z), C(z) give `r some (s some C)`.

Usage:
  ontosat -o family.owl                              # writes family-saturated.owl
  ontosat -o family.owl -O out.owl -m terminological
  ontosat -o family.owl -a extra_axioms.txt          # add axioms before saturating
  ontosat -o family.ttl -f turtle --json
  ontosat -o family.owl -c ontosat.yaml -v
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from ontosat.config import FORMATS, load_config
from ontosat.derivation import SaturationMode
from ontosat.errors import OntoSatError
from ontosat.model import ClassAssertion, EquivalentClasses
from ontosat.owl_io import default_output_path, save_ontology
from ontosat.saturator import Saturator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ontosat",
        description="Saturate an OWL ontology w.r.t. its role assertions.",
    )
    parser.add_argument(
        "-o", "-i", "--ontology", metavar="PATH",
        help="Path to the input ontology",
    )
    parser.add_argument(
        "-O", "--saturated-ontology", metavar="PATH",
        help="Where to store the saturated ontology "
             "(default: <input>-saturated.<ext> beside the input)",
    )
    parser.add_argument(
        "-m", "--mode", choices=[m.value for m in SaturationMode], default=None,
        help="Saturation mode (default: assertional)",
    )
    parser.add_argument(
        "-a", "--axioms", metavar="PATH",
        help="Text file of extra axioms (one per line) added before saturating",
    )
    parser.add_argument(
        "-f", "--format", choices=FORMATS, default=None,
        help="Output format (default: rdfxml)",
    )
    parser.add_argument(
        "-c", "--config", metavar="PATH",
        help="YAML configuration file",
    )
    parser.add_argument(
        "--json", dest="json_output", action="store_true",
        help="Print the run summary as JSON",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Debug logging",
    )
    return parser


def _summary(saturator: Saturator, output_path) -> dict:
    derived = saturator.derived()
    return {
        "input": saturator.ontology.iri,
        "mode": saturator.mode.value,
        "input_axioms": len(saturator.ontology),
        "derived_axioms": len(derived),
        "derived_assertions": sum(1 for a in derived if isinstance(a, ClassAssertion)),
        "derived_classes": sum(1 for a in derived if isinstance(a, EquivalentClasses)),
        "output_axioms": len(saturator.saturated),
        "output": str(output_path),
    }


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if not args.ontology:
        parser.error("Missing arguments: -o/--ontology is required.")

    try:
        config = load_config(args.config, mode=args.mode, format=args.format,
                             log_level="DEBUG" if args.verbose else None)
    except OntoSatError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=config["log_level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    output_path = args.saturated_ontology or default_output_path(
        args.ontology, config["output_suffix"], config["output_dir"], config["format"])

    try:
        saturator = Saturator.from_file(args.ontology, config["mode"], axioms_path=args.axioms)
        saturated = saturator.saturate()
        save_ontology(saturated, output_path, config["format"])
    except OntoSatError as e:
        print(f"Error while saturating: {e}", file=sys.stderr)
        return 1

    summary = _summary(saturator, output_path)
    if args.json_output:
        print(json.dumps(summary, indent=2))
    else:
        print(f"Saturated {args.ontology} ({summary['mode']} mode)")
        print(f"  {summary['input_axioms']} input axioms, "
              f"{summary['derived_axioms']} derived, "
              f"{summary['output_axioms']} total")
        print(f"  Saved to {summary['output']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
