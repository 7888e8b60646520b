"""Command-line interface for validation, masks and address lookups."""

from __future__ import annotations

import argparse
import json
from typing import Any, Optional

from cadastro.backend.services.locations import LocationService
from cadastro.common.errors import AddressLookupError
from cadastro.common.masking import MaskType, apply_mask, unmask
from cadastro.validation.engine import SINGLE_VALUE_RULES, validate_value

EXIT_INVALID = 1
EXIT_LOOKUP_FAILED = 2


def _print(data: Any, pretty: bool) -> None:
    print(json.dumps(data, indent=2 if pretty else None, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Ferramentas do cadastro de investidores")
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Imprime JSON formatado",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    mask_choices = [mask.value for mask in MaskType]

    validate_parser = subparsers.add_parser("validate", help="Valida um valor isolado")
    validate_parser.add_argument("kind", choices=SINGLE_VALUE_RULES)
    validate_parser.add_argument("value")

    mask_parser = subparsers.add_parser("mask", help="Aplica a máscara de exibição")
    mask_parser.add_argument("type", choices=mask_choices)
    mask_parser.add_argument("value")

    unmask_parser = subparsers.add_parser("unmask", help="Remove a máscara de exibição")
    unmask_parser.add_argument("type", choices=mask_choices)
    unmask_parser.add_argument("value")

    cep_parser = subparsers.add_parser("cep", help="Consulta um CEP no ViaCEP")
    cep_parser.add_argument("code")

    subparsers.add_parser("estados", help="Lista os estados (IBGE)")

    cities_parser = subparsers.add_parser("municipios", help="Lista os municípios de uma UF (IBGE)")
    cities_parser.add_argument("uf")

    return parser


def main(argv: Optional[list[str]] = None, service: Optional[LocationService] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "validate":
        result = validate_value(args.kind, args.value)
        _print(
            {
                "valid": result.is_valid,
                "message": result.message,
                "error": result.error.value if result.error else None,
            },
            args.pretty,
        )
        return 0 if result.is_valid else EXIT_INVALID

    if args.command == "mask":
        _print({"value": apply_mask(args.value, args.type)}, args.pretty)
        return 0

    if args.command == "unmask":
        _print({"value": unmask(args.value, args.type)}, args.pretty)
        return 0

    service = service or LocationService()
    try:
        if args.command == "cep":
            data: Any = service.lookup_cep(args.code).to_dict()
        elif args.command == "estados":
            data = service.list_states()
        else:
            data = service.list_cities(args.uf)
    except AddressLookupError as exc:
        _print({"error": exc.kind.value, "message": str(exc)}, args.pretty)
        return EXIT_LOOKUP_FAILED

    _print(data, args.pretty)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
