"""
Preview bundle for the in-browser sandbox.
"""

from dataclasses import dataclass, field

from .normalizer import ProjectFileSet, adapt_for_preview

PREVIEW_TEMPLATE = "react-ts"

PREVIEW_DEPENDENCIES = {
    "framer-motion": "latest",
    "lucide-react": "latest",
    "clsx": "latest",
    "tailwind-merge": "latest",
}

PREVIEW_EXTERNAL_RESOURCES = ["https://cdn.tailwindcss.com"]


@dataclass
class PreviewBundle:
    """Everything the sandbox needs to run a project."""

    files: ProjectFileSet
    dependencies: dict[str, str] = field(default_factory=lambda: dict(PREVIEW_DEPENDENCIES))
    external_resources: list[str] = field(default_factory=lambda: list(PREVIEW_EXTERNAL_RESOURCES))
    template: str = PREVIEW_TEMPLATE


def build_preview_bundle(files: ProjectFileSet | None) -> PreviewBundle:
    return PreviewBundle(files=adapt_for_preview(files or {}))
