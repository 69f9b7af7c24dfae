#!/usr/bin/env python3
"""Print what the renderer would draw for a project document.

Resolves every instance with the AUTO phase, the way the renderer does, and
lists the z-order warnings of each page.

Usage:
    python inspect_project.py --project data/project.yaml
    python inspect_project.py --project data/project.yaml --page page-2 --language en
"""
import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from cascade.conflicts import find_page_conflicts
from cascade.resolver import resolve_context, resolve_settings, resolve_text
from models.project import Page, Project
from settings import Settings

logger = logging.getLogger("inspect_project")


def describe_page(project: Project, page: Page, language: str) -> list[str]:
    lines = [f"Page {page.id}: {page.title} [{language}]"]
    for instance_id, instance in page.asset_instances.items():
        asset = project.assets.get(instance.asset_id)
        if asset is None:
            lines.append(f"  {instance_id}: asset {instance.asset_id} missing")
            continue
        text = resolve_text(asset, instance, language)
        context = resolve_context(asset, instance, language)
        settings = resolve_settings(asset, instance, language)
        lines.append(f"  {instance_id} ({asset.name}): {text!r}")
        if context:
            lines.append(f"    context: {context}")
        lines.append(
            "    pos=({pos_x:g}, {pos_y:g}) font={font} size={font_size:g} z={z_index} opacity={opacity:g}".format(
                **settings.model_dump()
            )
        )
    for conflict in find_page_conflicts(page, project.assets, language):
        lines.append(f"  ! {conflict.instance_id}: {conflict.message}")
    return lines


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--project", type=Path, required=True, help="Project document (YAML or JSON)")
    parser.add_argument("--page", default=None, help="Only this page id (default: all pages)")
    parser.add_argument("--language", default=None,
                        help="Language to resolve (default: the project's current language)")
    args = parser.parse_args()

    settings = Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )

    project = Project.load(args.project)
    language = args.language or project.metadata.current_language
    if language not in project.metadata.supported_languages:
        parser.error(f"language {language!r} is not supported by this project")

    pages = project.pages
    if args.page:
        page = project.page(args.page)
        if page is None:
            parser.error(f"no page with id {args.page!r}")
        pages = [page]

    logger.info("Loaded %s: %d assets, %d pages", args.project, len(project.assets), len(project.pages))
    for page in pages:
        print("\n".join(describe_page(project, page, language)))


if __name__ == "__main__":
    main()
