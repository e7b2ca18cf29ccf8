"""
Response normalizer.

Turns the model's free-text answer into a validated GeneratedResult and turns
an arbitrary generated file set into a self-contained single-page app the
sandboxed preview can mount.

Everything here is a pure transform over its inputs.
"""

import json
import logging
import re

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from core.exceptions import InvalidJsonError, NoJsonFoundError

logger = logging.getLogger(__name__)

ProjectFileSet = dict[str, str]


class GeneratedResult(BaseModel):
    """Files plus a short description, as produced by one model call."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    files: dict[str, str]
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def _empty_description(cls, value):
        return "" if value is None else value


# ============ parse_model_response ============

_LEADING_JSON_FENCE = re.compile(r"^```json\s*", re.IGNORECASE)
_LEADING_FENCE = re.compile(r"^```\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def _strip_fences(raw: str) -> str:
    text = _LEADING_JSON_FENCE.sub("", raw)
    text = _LEADING_FENCE.sub("", text)
    text = _TRAILING_FENCE.sub("", text)
    return text.strip()


def parse_model_response(raw: str) -> GeneratedResult:
    """
    Extract the project JSON from a model answer.

    Fence markers are stripped, then everything between the first "{" and the
    last "}" is parsed. Prose around the object is tolerated; braces inside
    string literals outside the object are not.

    Raises:
        NoJsonFoundError: no "{" or no "}" in the answer
        InvalidJsonError: the candidate does not parse or has no files mapping
    """
    text = _strip_fences(raw or "")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1:
        raise NoJsonFoundError(details={"length": len(text)})

    candidate = text[start:end + 1]
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise InvalidJsonError(details={"error": str(e)})

    if not isinstance(data, dict) or "files" not in data:
        raise InvalidJsonError(details={"error": "missing files mapping"})

    try:
        return GeneratedResult.model_validate(data)
    except PydanticValidationError as e:
        raise InvalidJsonError(details={"error": e.errors(include_url=False)[0]["msg"]})


# ============ merge_for_update ============


def merge_for_update(previous: ProjectFileSet, result: GeneratedResult) -> ProjectFileSet:
    """
    Return the file set that replaces `previous` after an update.

    The model is asked for the complete tree, so the new set replaces the old
    one wholesale. Files the model left out are gone.
    """
    dropped = set(previous or {}) - set(result.files)
    if dropped:
        logger.debug(f"Update drops {len(dropped)} file(s): {sorted(dropped)}")
    return dict(result.files)


# ============ adapt_for_preview ============

APP_PATH = "/App.tsx"
MOUNT_PATH = "/index.tsx"
HTML_PATH = "/index.html"

COMPONENT_EXTENSIONS = (".tsx", ".jsx")
PAGE_PATHS = tuple(f"/page{ext}" for ext in COMPONENT_EXTENSIONS)
APP_PATHS = tuple(f"/App{ext}" for ext in COMPONENT_EXTENSIONS)

# Module specifiers under the "@/" alias become root-relative.
_ALIAS_FROM = re.compile(r"""from\s+['"]@/(.*)['"]""")
_ALIAS_IMPORT = re.compile(r"""import\s+['"]@/(.*)['"]""")

PAGE_ENTRY = """
import React from 'react';
import Page from './page';

export default function App() {
  return (
    <div className="min-h-screen bg-black text-white">
      <Page />
    </div>
  );
}
"""

EMPTY_ENTRY = """
export default function App() {
  return (
    <div className="flex h-screen items-center justify-center bg-black text-white">
      <div className="text-center">
        <h2 className="text-xl font-bold mb-2">Project is Empty</h2>
        <p className="text-gray-400">Ask Cenly to generate some code!</p>
      </div>
    </div>
  );
}
"""

MOUNT_ENTRY = """
import React, { StrictMode } from "react";
import { createRoot } from "react-dom/client";
import App from "./App";

const rootElement = document.getElementById("root");
const root = createRoot(rootElement!);

root.render(
  <StrictMode>
    <App />
  </StrictMode>
);
"""

HTML_SHELL = """
<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1, shrink-to-fit=no">
    <title>Cenly Preview</title>
  </head>
  <body class="bg-black text-white">
    <div id="root"></div>
  </body>
</html>
"""


def normalize_path(path: str) -> str:
    """Strip one leading "/" and one leading "src/" segment."""
    clean = path[1:] if path.startswith("/") else path
    if clean.startswith("src/"):
        clean = clean[len("src/"):]
    return clean


def rewrite_alias_imports(content: str) -> str:
    """
    Rewrite '@/x' module specifiers to "/x".

    Textual, line by line: an "@/..." inside an unrelated string that follows
    `from` or `import` is rewritten too.
    """
    content = _ALIAS_FROM.sub(r'from "/\1"', content)
    return _ALIAS_IMPORT.sub(r'import "/\1"', content)


def _component_entry(path: str) -> str:
    module = "." + path.rsplit(".", 1)[0]
    return f"import Page from '{module}'; export default function App() {{ return <Page />; }}"


def select_entry_point(files: ProjectFileSet) -> str | None:
    """
    Pick the App root source for an already normalized file set.

    Returns None when an existing App root must be kept as is.
    """
    if any(p in files for p in PAGE_PATHS):
        return PAGE_ENTRY
    if any(p in files for p in APP_PATHS):
        return None

    first_component = next(
        (
            p for p in files
            if p.endswith(COMPONENT_EXTENSIONS) and p not in APP_PATHS and p != MOUNT_PATH
        ),
        None,
    )
    if first_component:
        return _component_entry(first_component)
    return EMPTY_ENTRY


def adapt_for_preview(files: ProjectFileSet) -> ProjectFileSet:
    """
    Turn a generated file set into a runnable single-page app.

    Paths come back absolute-style ("/components/Button.tsx"). The result
    always holds an App root, a mount file and an HTML shell, whatever the
    input looked like.
    """
    adapted: ProjectFileSet = {}
    for path, content in (files or {}).items():
        adapted[f"/{normalize_path(path)}"] = rewrite_alias_imports(content or "")

    entry = select_entry_point(adapted)
    if entry is not None:
        adapted[APP_PATH] = entry

    if MOUNT_PATH not in adapted:
        adapted[MOUNT_PATH] = MOUNT_ENTRY

    adapted[HTML_PATH] = HTML_SHELL
    return adapted
