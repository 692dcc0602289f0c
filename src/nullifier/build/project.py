"""Turns on ``<Nullable>enable</Nullable>`` in a C# project file."""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from xml.etree import ElementTree

from nullifier.fix.buffer import is_read_only

logger = logging.getLogger(__name__)


class NullableStatus(enum.Enum):
    NOT_FOUND = "not_found"
    ALREADY_ENABLED = "already_enabled"
    NEEDS_UPDATE = "needs_update"
    UPDATED = "updated"


def find_project_file(project_dir: Path, project_file: Path | None = None) -> Path | None:
    """Return the project file, or the only *.csproj in project_dir."""
    if project_file is not None:
        return project_file if project_file.is_file() else None
    if not project_dir.is_dir():
        return None
    projects = sorted(project_dir.glob("*.csproj"))
    if len(projects) == 1:
        return projects[0]
    return None


def _namespace(tag: str) -> str:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return ""


def _ensure_nullable(root: ElementTree.Element) -> bool:
    """Set Nullable=enable in the first unconditional PropertyGroup. Returns True if modified."""
    ns = _namespace(root.tag)
    prefix = f"{{{ns}}}" if ns else ""
    modified = False

    group = next(
        (g for g in root.findall(f"{prefix}PropertyGroup") if not g.attrib),
        None,
    )
    if group is None:
        group = ElementTree.SubElement(root, f"{prefix}PropertyGroup")
        modified = True

    nullable = group.find(f"{prefix}Nullable")
    if nullable is None:
        indent = "\t" if "\t" in (group.text or "") else "  "
        nullable = ElementTree.Element(f"{prefix}Nullable")
        if len(group):
            last = group[-1]
            nullable.tail = last.tail
            last.tail = group.text or f"\n{indent}{indent}"
        else:
            group.text = f"\n{indent}{indent}"
            nullable.tail = f"\n{indent}"
        group.append(nullable)
        modified = True

    if nullable.text != "enable":
        nullable.text = "enable"
        modified = True

    return modified


def enable_nullable(
    project_dir: Path,
    project_file: Path | None = None,
    dry_run: bool = False,
) -> NullableStatus:
    """Make sure the project enables nullable reference types."""
    path = find_project_file(project_dir, project_file)
    if path is None:
        return NullableStatus.NOT_FOUND

    parser = ElementTree.XMLParser(target=ElementTree.TreeBuilder(insert_comments=True))
    tree = ElementTree.parse(path, parser=parser)
    root = tree.getroot()

    ns = _namespace(root.tag)
    if ns:
        ElementTree.register_namespace("", ns)

    if not _ensure_nullable(root):
        return NullableStatus.ALREADY_ENABLED

    if dry_run or is_read_only(path):
        logger.debug("%s needs Nullable enabled but will not be written", path)
        return NullableStatus.NEEDS_UPDATE

    tree.write(path, encoding="utf-8", xml_declaration=False)
    logger.debug("Enabled Nullable in %s", path)
    return NullableStatus.UPDATED
