"""Output formatters for duplicate package reports."""

import json
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple
from uuid import uuid4

from packageurl import PackageURL
from cyclonedx.model import ExternalReference, ExternalReferenceType, Property, XsUri
from cyclonedx.model.bom import Bom
from cyclonedx.model.component import Component, ComponentType
from cyclonedx.output.json import JsonV1Dot6
from rich.console import Console
from rich.text import Text

from .models import DuplicateMap, Instance, package_purl

logger = logging.getLogger(__name__)

HELP_URL = (
    "https://github.com/kingback/duplicate-package-checker-webpack-plugin"
    "#resolving-duplicate-packages-in-your-bundle"
)
HELP_HEADER = "Check how you can resolve duplicate packages: "

INSTANCE_INDENT = "    "


def sorted_duplicates(duplicates: DuplicateMap) -> List[Tuple[str, List[Instance]]]:
    """
    Order a duplicate map for presentation.

    Names sort ascending and instances sort by plain string comparison of
    their versions, so "10.0.0" sorts before "9.0.0".
    """
    return [
        (name, sorted(duplicates[name], key=lambda instance: instance.version))
        for name in sorted(duplicates)
    ]


class ReportFormatter:
    """Formatter for the various report formats."""

    @staticmethod
    def format_instance(instance: Instance, verbose: bool = False) -> str:
        """Format one instance line without indentation."""
        issuer_paths = "\n".join(instance.issuer_paths)
        line = f"{instance.version} {issuer_paths}"
        if verbose and instance.issuer:
            line += f" from {instance.issuer}"
        return line

    @staticmethod
    def format_diagnostics(
        duplicates: DuplicateMap,
        verbose: bool = False,
        show_help: bool = True
    ) -> List[str]:
        """
        Format one diagnostic message per duplicated package.

        Example:
            lodash
              Multiple versions of lodash found:
                3.10.1 ~/app@1.0.0 -> legacy@2.0.0
                4.17.21 ~/
        """
        entries = sorted_duplicates(duplicates)
        messages = []

        for index, (name, instances) in enumerate(entries, 1):
            lines = [ReportFormatter.format_instance(instance, verbose) for instance in instances]
            body = ("\n" + INSTANCE_INDENT).join(lines)
            message = (
                f"{name}\n"
                f"  Multiple versions of {name} found:\n"
                f"{INSTANCE_INDENT}{body}\n"
            )
            if show_help and index == len(entries):
                message += f"\n{HELP_HEADER}\n{HELP_URL}\n"
            messages.append(message)

        return messages

    @staticmethod
    def format_as_json(duplicates: DuplicateMap) -> str:
        """Format duplicates as JSON with stable ordering."""
        report = {
            name: [
                {
                    'version': instance.version,
                    'path': instance.path,
                    'issuer': instance.issuer,
                    'issuerPaths': list(instance.issuer_paths),
                }
                for instance in instances
            ]
            for name, instances in sorted_duplicates(duplicates)
        }
        return json.dumps(report, indent=2) + '\n'

    @staticmethod
    def format_as_sbom(duplicates: DuplicateMap) -> str:
        """Generate a CycloneDX SBOM in JSON format listing every duplicated instance."""
        from . import __version__

        bom = Bom()
        bom.serial_number = uuid4()
        bom.metadata.timestamp = datetime.now(timezone.utc).replace(microsecond=0)

        tool_component = Component(
            name="dupcheck",
            version=__version__,
            type=ComponentType.APPLICATION,
            bom_ref=f"dupcheck@{__version__}",
            external_references=[
                ExternalReference(type=ExternalReferenceType.DOCUMENTATION, url=XsUri(HELP_URL))
            ]
        )
        bom.metadata.tools.components.add(tool_component)

        count = 0
        for name, instances in sorted_duplicates(duplicates):
            for instance in instances:
                bom.components.add(ReportFormatter._instance_to_component(name, instance))
                count += 1

        logger.info(f"Generated SBOM with {count} duplicated components")

        outputter = JsonV1Dot6(bom)
        sbom = json.loads(outputter.output_as_string())
        return json.dumps(sbom, indent=2) + '\n'

    @staticmethod
    def _instance_to_component(name: str, instance: Instance) -> Component:
        """Convert a duplicated instance into a CycloneDX component."""
        purl = package_purl(name, instance.version)

        group = None
        short_name = name
        if name.startswith('@') and '/' in name:
            group, short_name = name.split('/', 1)

        properties = [Property(name="dupcheck:path", value=instance.path)]
        if instance.issuer:
            properties.append(Property(name="dupcheck:issuer", value=instance.issuer))
        for issuer_path in instance.issuer_paths:
            properties.append(Property(name="dupcheck:issuerPath", value=issuer_path))

        return Component(
            name=short_name,
            group=group,
            version=instance.version,
            type=ComponentType.LIBRARY,
            purl=PackageURL.from_string(purl),
            bom_ref=purl,
            properties=properties
        )


def render_rich(
    duplicates: DuplicateMap,
    verbose: bool = False,
    show_help: bool = True,
    console: Optional[Console] = None
) -> None:
    """Print the report with colors, using the same layout as format_diagnostics."""
    console = console or Console(stderr=True, highlight=False)
    entries = sorted_duplicates(duplicates)

    for index, (name, instances) in enumerate(entries, 1):
        text = Text()
        text.append(f"{name}\n")
        text.append("  Multiple versions of ")
        text.append(name, style="bold green")
        text.append(" found:\n", style="white")
        for instance in instances:
            text.append(INSTANCE_INDENT)
            text.append(instance.version, style="bold green")
            text.append(" ")
            text.append("\n".join(instance.issuer_paths), style="bold white")
            if verbose and instance.issuer:
                text.append(" from ")
                text.append(instance.issuer, style="bold white")
            text.append("\n")
        if show_help and index == len(entries):
            text.append("\n")
            text.append(HELP_HEADER, style="bold white")
            text.append(f"\n{HELP_URL}\n")
        console.print(text, end="", soft_wrap=True)
