import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Type

from mcp import types as mcp_types
from pydantic import BaseModel, ValidationError

from ..common.context import set_correlation_id
from ..common.log_calls import log_calls
from .client import DAAdminClient
from .logging import jlog
from .operations.assets import preview_resource, publish_resource, upload_asset
from .operations.source import create_source, delete_source, get_source, list_sources
from .schemas import (
    CreateSourceArgs,
    DeleteSourceArgs,
    GetSourceArgs,
    ListSourcesArgs,
    StageArgs,
    UploadAssetArgs,
)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    schema: Type[BaseModel]
    handler: Callable[[DAAdminClient, Any], Awaitable[Any]]

    def to_mcp(self) -> mcp_types.Tool:
        return mcp_types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.schema.model_json_schema(),
        )


# -----------------------
# Handlers
# -----------------------

@log_calls("da_admin_get_source")
async def _get_source(client: DAAdminClient, args: GetSourceArgs) -> Any:
    return await get_source(client, args.org, args.repo, args.path, args.ext)

@log_calls("da_admin_create_source")
async def _create_source(client: DAAdminClient, args: CreateSourceArgs) -> Any:
    return await create_source(client, args.org, args.repo, args.path, args.ext, args.content)

@log_calls("da_admin_delete_source")
async def _delete_source(client: DAAdminClient, args: DeleteSourceArgs) -> Any:
    return await delete_source(client, args.org, args.repo, args.path, args.ext)

@log_calls("da_admin_list_sources")
async def _list_sources(client: DAAdminClient, args: ListSourcesArgs) -> Any:
    return await list_sources(client, args.org, args.repo, args.path)

@log_calls("da_admin_upload_asset")
async def _upload_asset(client: DAAdminClient, args: UploadAssetArgs) -> Any:
    result = await upload_asset(client, args.org, args.repo, args.path, args.file_path, args.content_type)
    return result.to_payload()

@log_calls("da_admin_preview")
async def _preview(client: DAAdminClient, args: StageArgs) -> Any:
    return await preview_resource(client, args.org, args.repo, args.path)

@log_calls("da_admin_publish")
async def _publish(client: DAAdminClient, args: StageArgs) -> Any:
    return await publish_resource(client, args.org, args.repo, args.path)


TOOLS: List[ToolDefinition] = [
    ToolDefinition(
        name="da_admin_get_source",
        description="Get source content from an organization: can be an html file or a json file",
        schema=GetSourceArgs,
        handler=_get_source,
    ),
    ToolDefinition(
        name="da_admin_create_source",
        description="Create source content within an organization: can be an html file or a json file",
        schema=CreateSourceArgs,
        handler=_create_source,
    ),
    ToolDefinition(
        name="da_admin_delete_source",
        description="Delete source content from an organization: can be an html file or a json file",
        schema=DeleteSourceArgs,
        handler=_delete_source,
    ),
    ToolDefinition(
        name="da_admin_list_sources",
        description="List the documents and folders under a path of a repository",
        schema=ListSourcesArgs,
        handler=_list_sources,
    ),
    ToolDefinition(
        name="da_admin_upload_asset",
        description=(
            "Upload a local binary asset (image, video, pdf...) to a repository, "
            "then trigger preview and publish for it. Returns the preview and live URLs."
        ),
        schema=UploadAssetArgs,
        handler=_upload_asset,
    ),
    ToolDefinition(
        name="da_admin_preview",
        description="Trigger a preview of a resource",
        schema=StageArgs,
        handler=_preview,
    ),
    ToolDefinition(
        name="da_admin_publish",
        description="Publish a resource to the live site",
        schema=StageArgs,
        handler=_publish,
    ),
]

available_tools: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOLS}


def format_tool_response(data: Any) -> List[mcp_types.TextContent]:
    return [mcp_types.TextContent(type="text", text=json.dumps(data, indent=2))]

def _error_response(message: str) -> List[mcp_types.TextContent]:
    return [mcp_types.TextContent(type="text", text=json.dumps({"error": message}))]


async def call_tool(client: DAAdminClient, name: str, arguments: Dict[str, Any]) -> List[mcp_types.TextContent]:
    """Validate arguments, run the named tool and wrap its output as MCP text content."""
    set_correlation_id()
    tool = available_tools.get(name)
    if tool is None:
        jlog(event="tool_not_found", tool=name)
        return _error_response(f"Tool '{name}' not implemented.")

    try:
        args = tool.schema.model_validate(arguments or {})
    except ValidationError as e:
        jlog(event="tool_invalid_arguments", tool=name, error=str(e))
        return _error_response(f"Invalid arguments for tool '{name}': {e}")

    try:
        data = await tool.handler(client, args)
    except Exception as e:
        return _error_response(f"Failed to execute tool '{name}': {e}")

    return format_tool_response(data)
