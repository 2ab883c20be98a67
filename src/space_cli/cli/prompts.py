"""
Interactive dialogues for authoring a manifest and publishing terms.

These only collect answers; building the Format and validating it stay in
``space_cli.schema``.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import List, Optional, Tuple

import click
from pydantic import ValidationError

from space_cli.errors import OptionsError
from space_cli.schema import LICENSE_TYPES, PRIMITIVE_TYPES, Format
from space_cli.upload import PublishOptions


class PriceType(click.FloatRange):
    """Non-negative, finite price."""
    name = "price"

    def __init__(self):
        super().__init__(min=0)

    def convert(self, value, param, ctx):
        price = super().convert(value, param, ctx)
        if not math.isfinite(price):
            self.fail(f"{value!r} is not a finite price.", param, ctx)
        return price


PRICE = PriceType()


def titlecase(text: str) -> str:
    """Upper-case the first character and lower-case the rest."""
    if not text:
        return ""
    return text[0].upper() + text[1:].lower()


def suggested_name(artifact: Optional[Path]) -> str:
    """Display name proposed for an artifact, e.g. ``hello.wasm`` -> ``Hello``."""
    if artifact is None:
        return ""
    return titlecase(artifact.stem)


def read_list(prefix: str) -> List[Tuple[str, str]]:
    """Ask for ``(name, type)`` pairs until an empty name is entered."""
    values: List[Tuple[str, str]] = []
    while True:
        if values:
            name, type_tag = values[-1]
            click.echo(f"{titlecase(prefix)}: {name} -> {type_tag}")

        name = click.prompt(
            f"Name of {prefix} (empty to finish)",
            default="",
            show_default=False,
        ).strip()
        if not name:
            break

        if any(existing == name for existing, _ in values):
            click.echo(f"{titlecase(prefix)} {name} already exists", err=True)
            continue

        type_tag = click.prompt(
            f"Type for {name}",
            type=click.Choice(PRIMITIVE_TYPES),
            default=PRIMITIVE_TYPES[0],
        )
        values.append((name, type_tag))
    return values


def read_format(artifact: Optional[Path] = None) -> Format:
    """Run the naming/typing dialogue and build a Format."""
    name = click.prompt("Name", default=suggested_name(artifact) or None)
    version = click.prompt("Version", default="0.1")
    description = click.prompt("Description", default="", show_default=False)

    inputs = read_list("input")
    outputs = read_list("output")

    return Format.create(name, version, description, inputs, outputs)


def read_publish_options(
    is_public: Optional[bool] = None,
    license_label: Optional[str] = None,
    price_one_time: Optional[float] = None,
    price_per_run: Optional[float] = None,
) -> PublishOptions:
    """Ask for every publishing term not already given."""
    if is_public is None:
        is_public = click.confirm("Public", default=True)
    click.echo(f"Public: {str(is_public).lower()}")

    if license_label is None:
        license_label = click.prompt(
            "License",
            type=click.Choice(list(LICENSE_TYPES)),
            default="MIT",
        )
    license_type = LICENSE_TYPES[license_label]
    click.echo(f"License: {license_type}")

    if price_one_time is None:
        price_one_time = click.prompt("One-time payment", type=PRICE, default=0.0)
    if price_per_run is None:
        price_per_run = click.prompt("Price per run", type=PRICE, default=0.0)

    try:
        return PublishOptions(
            is_public=is_public,
            license_type=license_type,
            price_one_time=price_one_time,
            price_per_run=price_per_run,
        )
    except ValidationError as e:
        raise OptionsError(f"Invalid publishing terms: {e}") from e
