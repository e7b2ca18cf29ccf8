"""
Prompt text sent to the model.
"""

import json

SYSTEM_PROMPT = """You are Cenly AI, a world-class senior full-stack engineer specialized in React, Next.js (App Router), TypeScript, Tailwind CSS, and SaaS architecture.
Your goal is to generate high-quality, production-ready React projects based on user descriptions.

Always respond with a JSON object representing the file structure.
Format:
{
  "files": {
    "filename.tsx": "file content...",
    "components/Header.tsx": "file content...",
    "lib/utils.ts": "file content..."
  },
  "description": "Brief description of the project"
}

Rules:
1. Use modern React patterns (hooks, functional components).
2. Use Tailwind CSS for styling.
3. Assume a standard Next.js App Router structure.
4. Do not include node_modules or configuration files like package.json unless specifically asked.
5. Ensure all components are imported correctly.
6. The main entry point should be 'page.tsx'.
7. ALWAYS return valid JSON. Do not include any markdown formatting or explanations outside the JSON block.
8. **CRITICAL ROLE**: AI must NOT change UI design (colors, spacing, layout) in existing files unless the user explicitly requests a UI change.
9. Focus on logic, bug fixes, performance improvements, and new functional features.
10. Use **relative imports** (e.g., './Button' instead of '@/components/Button').
11. Ensure **EVERY** component you import is included in the 'files' object. Do not reference non-existent files.
12. If updating an existing project, return the full updated structure of the files to ensure consistency.
13. **SANDPACK COMPATIBILITY**: Strictly avoid Next.js-only modules like `next/link`, `next/image`, `next/navigation`. Use standard HTML tags (e.g., `<a>` instead of `<Link>`) or relative React components instead. The preview environment is pure React, NOT Next.js."""

ASSISTANT_PROMPT = "You are Cenly AI, a helpful coding assistant."

AUTOFIX_TEMPLATE = "I'm getting this error in the preview: {error}. Please fix it."

ROLE_LABELS = {"user": "User", "model": "Assistant"}


def format_history(history: list[dict], max_messages: int) -> str:
    """Render the last `max_messages` turns as "User: ..." / "Assistant: ..." lines."""
    if max_messages <= 0:
        return ""
    recent = history[-max_messages:]
    return "\n".join(
        f"{ROLE_LABELS.get(m.get('role'), 'Assistant')}: {m.get('text', '')}" for m in recent
    )


def build_update_prompt(
    prompt: str,
    current_files: dict[str, str],
    history: list[dict] | None = None,
    max_history: int = 20,
) -> str:
    """Build the context prompt for an update call."""
    conversation = format_history(history or [], max_history)
    history_block = f"Conversation History:\n{conversation}\n" if conversation else ""

    return f"""
{history_block}
Current project structure:
{json.dumps(current_files, indent=2)}

User request for update:
{prompt}

Please update the project files accordingly and return the full updated JSON structure.
"""


def build_autofix_prompt(error: str) -> str:
    return AUTOFIX_TEMPLATE.format(error=error.strip())
