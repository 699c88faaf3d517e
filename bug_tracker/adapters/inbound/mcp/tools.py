import logging
import traceback
from datetime import datetime

from mcp.server import Server
from mcp.types import TextContent

from bug_tracker.configuration.container import Container, build_container

logger = logging.getLogger(__name__)

_DATE_FORMAT = "%Y-%m-%d %H:%M"
_TITLE_WIDTH = 20

# Long free-text fields are shortened in the call log
_SENSITIVE_FIELDS = {"description", "text"}


def truncate(text: str, max_length: int = _TITLE_WIDTH) -> str:
    """Shortens text for table cells, ending with '...' when cut."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def _format_date(value: datetime) -> str:
    return value.strftime(_DATE_FORMAT)


def _escape_cell(text: str) -> str:
    return str(text).replace("|", "\\|").replace("\n", " ")


def _require(arguments: dict, key: str) -> str:
    value = arguments.get(key)
    if value is None or not str(value).strip():
        raise ValueError(f"'{key}' parameter is required")
    return str(value).strip()


def _optional(arguments: dict, key: str) -> str | None:
    value = arguments.get(key)
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def _is_confirmed(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in {"y", "yes", "true"}


def _mask_arguments(arguments: dict) -> dict:
    masked = {}
    for key, value in arguments.items():
        if key in _SENSITIVE_FIELDS and isinstance(value, str) and len(value) > 20:
            masked[key] = f"{value[:20]}... ({len(value)} chars)"
        else:
            masked[key] = value
    return masked


def _failure(title: str, result: dict) -> str:
    text = f"# ⚠️ {title}\n\n{result['reason']}\n"
    if result.get("available"):
        text += f"\n**Available transitions:** {', '.join(result['available'])}\n"
    return text


def format_bug_table(bugs: list[dict], heading: str) -> str:
    if not bugs:
        return f"# 🐞 {heading}\n\nNo bugs found.\n"

    lines = [
        f"# 🐞 {heading}\n",
        f"**Total:** {len(bugs)}\n",
        "| ID | Title | Status | Priority | Assigned To |",
        "|----|-------|--------|----------|-------------|",
    ]
    for bug in bugs:
        lines.append(
            f"| {bug['id']} | {_escape_cell(truncate(bug['title']))} | {bug['status']} "
            f"| {bug['priority']} | {bug['assignee'] or 'Unassigned'} |"
        )
    return "\n".join(lines) + "\n"


def format_bug_detail(bug: dict) -> str:
    text = f"# 🐞 Bug #{bug['id']}: {bug['title']}\n\n"
    text += "| Field | Value |\n"
    text += "|-------|-------|\n"
    text += f"| **ID** | {bug['id']} |\n"
    text += f"| **Project** | {_escape_cell(bug['project_name'])} |\n"
    text += f"| **Status** | {bug['status']} |\n"
    text += f"| **Priority** | {bug['priority']} |\n"
    text += f"| **Reported by** | {bug['reporter']} |\n"
    text += f"| **Assigned to** | {bug['assignee'] or 'Unassigned'} |\n"
    text += f"| **Created** | {_format_date(bug['created_date'])} |\n"
    text += f"| **Updated** | {_format_date(bug['updated_date'])} |\n"

    if bug.get("description"):
        text += f"\n### 📝 Description\n\n{bug['description'].strip()}\n"

    comments = bug.get("comments") or []
    if comments:
        text += "\n### 💬 Comments\n\n"
        for c in comments:
            text += f"- [{_format_date(c['timestamp'])}] **{c['author']}**: {c['text']}\n"
    return text


def dispatch_tool(container: Container, name: str, arguments: dict) -> str:
    """
    Runs a single tool call and returns its markdown response.

    Raises:
        ValueError: missing or malformed arguments, or unknown tool
    """
    if name == "identify_user":
        username = _require(arguments, "username")
        user = container.identify_user_use_case.execute(username=username)
        if user is None:
            return f"# ⚠️ Unknown user\n\n**Username:** {username}\n"
        return f"# 👤 {user['username']}\n\n**ID:** {user['id']}\n\n**Role:** {user['role']}\n"

    if name == "list_users":
        users = container.list_users_use_case.execute(role=arguments.get("role"))
        lines = ["# 👥 Users\n", "| ID | Username | Role |", "|----|----------|------|"]
        lines += [f"| {u['id']} | {u['username']} | {u['role']} |" for u in users]
        return "\n".join(lines) + "\n"

    if name == "list_projects":
        projects = container.list_projects_use_case.execute()
        if not projects:
            return "# 📁 Projects\n\nNo projects available.\n"
        lines = ["# 📁 Projects\n", "| ID | Name | Description |", "|----|------|-------------|"]
        lines += [
            f"| {p['id']} | {_escape_cell(p['name'])} | {_escape_cell(p['description'])} |"
            for p in projects
        ]
        return "\n".join(lines) + "\n"

    if name == "create_project":
        result = container.create_project_use_case.execute(
            username=_require(arguments, "username"),
            name=arguments.get("name", ""),
            description=arguments.get("description", ""),
        )
        if not result["success"]:
            return _failure("Project not created", result)
        project = result["project"]
        return f"# ✅ Project created\n\n**ID:** {project['id']}\n\n**Name:** {project['name']}\n"

    if name == "list_bugs":
        scope = arguments.get("scope", "project")
        bugs = container.get_bugs_use_case.execute(
            scope=scope,
            project_id=_optional(arguments, "project_id"),
            username=_optional(arguments, "username"),
        )
        return format_bug_table(bugs, f"Bugs ({scope})")

    if name == "get_bug":
        bug_id = _require(arguments, "bug_id")
        bug = container.get_bug_by_id_use_case.execute(
            bug_id=bug_id,
            project_id=_optional(arguments, "project_id"),
        )
        if bug is None:
            return f"# ⚠️ Bug not found\n\n**Bug ID:** {bug_id}\n"
        return format_bug_detail(bug)

    if name == "report_bug":
        result = container.report_bug_use_case.execute(
            username=_require(arguments, "username"),
            project_id=_require(arguments, "project_id"),
            title=arguments.get("title", ""),
            description=arguments.get("description", ""),
            priority=arguments.get("priority"),
        )
        if not result["success"]:
            return _failure("Bug not reported", result)
        bug = result["bug"]
        return f"# ✅ Bug #{bug['id']} reported successfully\n\n**Priority:** {bug['priority']}\n"

    if name == "assign_bug":
        result = container.assign_bug_use_case.execute(
            username=_require(arguments, "username"),
            bug_id=_require(arguments, "bug_id"),
            developer=_require(arguments, "developer"),
        )
        if not result["success"]:
            return _failure("Bug not assigned", result)
        return (
            f"# ✅ Bug #{result['bug_id']} assigned to {result['assignee']}\n\n"
            f"**Status:** {result['status']}\n"
        )

    if name == "update_bug_status":
        result = container.transition_bug_use_case.execute(
            username=_require(arguments, "username"),
            bug_id=_require(arguments, "bug_id"),
            target_status=_require(arguments, "target_status"),
        )
        if not result["success"]:
            return _failure("Status not updated", result)
        text = "# 🔄 Bug status updated\n\n"
        text += "| Field | Value |\n"
        text += "|-------|-------|\n"
        text += f"| **Bug** | #{result['bug_id']} |\n"
        text += f"| **Previous status** | {result['previous_status']} |\n"
        text += f"| **Current status** | {result['new_status']} |\n"
        return text

    if name == "close_bug":
        result = container.close_bug_use_case.execute(
            username=_require(arguments, "username"),
            bug_id=_require(arguments, "bug_id"),
            confirm=_is_confirmed(arguments.get("confirm")),
        )
        if not result["success"]:
            return _failure("Bug not closed", result)
        return f"# ✅ Bug #{result['bug_id']} closed successfully\n"

    if name == "add_comment":
        result = container.comment_on_bug_use_case.execute(
            username=_require(arguments, "username"),
            bug_id=_require(arguments, "bug_id"),
            text=arguments.get("text", ""),
        )
        if not result["success"]:
            return _failure("Comment not added", result)
        return f"# 💬 Comment added to bug #{result['bug_id']}\n\n**Comments:** {result['comment_count']}\n"

    raise ValueError(f"Unknown tool: {name}")


def register_tools(app: Server) -> None:
    """Registers the MCP tool handlers on the server."""

    @app.call_tool()
    async def call_tool(name: str, arguments: dict):
        try:
            container = build_container()
            logger.info("=" * 60)
            logger.info("🔧 Tool call: %s", name)
            logger.info("Arguments: %s", _mask_arguments(arguments or {}))
            logger.info("=" * 60)

            text = dispatch_tool(container, name, arguments or {})
            logger.info("✅ Tool finished: %s", name)
            return [TextContent(type="text", text=text)]

        except Exception as e:
            logger.error("❌ Tool failed: %s", name)
            logger.error("Error type: %s", type(e).__name__)
            logger.error("Error message: %s", str(e))
            logger.error(traceback.format_exc())

            error_message = f"""# ❌ Error

**Tool:** {name}
**Error type:** {type(e).__name__}
**Message:** {str(e)}

See the server log for details.
"""
            return [TextContent(type="text", text=error_message)]

    @app.list_tools()
    async def list_tools():
        from mcp.types import Tool

        username_property = {
            "type": "string",
            "description": "Username of the acting user (e.g. 'manager1', 'dev1', 'tester1')",
        }
        bug_id_property = {"type": "string", "description": "Bug ID (e.g. '3')"}

        return [
            Tool(
                name="identify_user",
                description="""Looks up a user by username (case-insensitive) and returns their id and role.""",
                inputSchema={
                    "type": "object",
                    "properties": {"username": username_property},
                    "required": ["username"],
                },
            ),
            Tool(
                name="list_users",
                description="""Lists users, optionally only those with the given role.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "role": {
                            "type": "string",
                            "enum": ["PROJECT_MANAGER", "DEVELOPER", "TESTER"],
                            "description": "Only list users with this role",
                        },
                    },
                },
            ),
            Tool(
                name="list_projects",
                description="""Lists all projects.""",
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="create_project",
                description="""Creates a project. Project Managers only; the name must be unique (case-insensitive).""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "username": username_property,
                        "name": {"type": "string", "description": "Project name"},
                        "description": {"type": "string", "description": "Project description"},
                    },
                    "required": ["username", "name"],
                },
            ),
            Tool(
                name="list_bugs",
                description="""Lists bugs.

- **project**: bugs of `project_id`
- **assigned**: bugs assigned to `username`
- **reported**: bugs reported by `username`
- **all**: every bug""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "scope": {
                            "type": "string",
                            "enum": ["project", "assigned", "reported", "all"],
                            "description": "Which bugs to list (default: project)",
                        },
                        "project_id": {"type": "string", "description": "Project ID for scope 'project'"},
                        "username": username_property,
                    },
                },
            ),
            Tool(
                name="get_bug",
                description="""Shows full details of a bug including its comments.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "bug_id": bug_id_property,
                        "project_id": {"type": "string", "description": "Only match a bug in this project"},
                    },
                    "required": ["bug_id"],
                },
            ),
            Tool(
                name="report_bug",
                description="""Reports a new bug in NEW status. Testers only.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "username": username_property,
                        "project_id": {"type": "string", "description": "Project ID"},
                        "title": {"type": "string", "description": "Bug title"},
                        "description": {"type": "string", "description": "Bug description"},
                        "priority": {
                            "type": "string",
                            "enum": ["LOW", "MEDIUM", "HIGH"],
                            "description": "Priority (default: MEDIUM)",
                        },
                    },
                    "required": ["username", "project_id", "title", "description"],
                },
            ),
            Tool(
                name="assign_bug",
                description="""Assigns a NEW or IN_PROGRESS bug to a developer. Project Managers only.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "username": username_property,
                        "bug_id": bug_id_property,
                        "developer": {"type": "string", "description": "Username of the developer"},
                    },
                    "required": ["username", "bug_id", "developer"],
                },
            ),
            Tool(
                name="update_bug_status",
                description="""Moves a bug assigned to you one step forward. Developers only.

**Allowed transitions:** NEW → IN_PROGRESS, IN_PROGRESS → RESOLVED""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "username": username_property,
                        "bug_id": bug_id_property,
                        "target_status": {
                            "type": "string",
                            "enum": ["IN_PROGRESS", "RESOLVED"],
                            "description": "New status",
                        },
                    },
                    "required": ["username", "bug_id", "target_status"],
                },
            ),
            Tool(
                name="close_bug",
                description="""Closes a RESOLVED bug. Testers only; requires confirm=true.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "username": username_property,
                        "bug_id": bug_id_property,
                        "confirm": {"type": "boolean", "description": "Confirm closing the bug"},
                    },
                    "required": ["username", "bug_id", "confirm"],
                },
            ),
            Tool(
                name="add_comment",
                description="""Adds a comment to a bug. Any known user may comment.""",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "username": username_property,
                        "bug_id": bug_id_property,
                        "text": {"type": "string", "description": "Comment text"},
                    },
                    "required": ["username", "bug_id", "text"],
                },
            ),
        ]
