from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

# -----------------------
# Tool arguments
# -----------------------

CREATE_SOURCE_CONTENT_HELP = """
If extension is html: an html string using the following template: "<body><header></header><main><!-- content here --></main><footer></footer></body>". Only <main> should be populated with content.
If extension is json: a json string representing a spreadsheet which can have multiple sheets. Each sheet can have an array of rows (represented as a data property). Each row can have as many cells as needed. A cell is a key / value pair. Simple sample:
{
  "sheet1": {
    "total": 2,
    "data": [{"column1": "value11", "column2": "value12"}, {"column1": "value21", "column2": "value22"}]
  },
  ":names": ["sheet1"],
  ":type": "multi-sheet"
}
"""

class SourceRef(BaseModel):
    org: str = Field(..., min_length=1, description="The organization")
    repo: str = Field(..., min_length=1, description="Name of the repository")
    path: str = Field(..., min_length=1, description="Path to the source content (with or without extension)")
    ext: str = Field(..., min_length=1, description="The source content file extension: html or json")

class GetSourceArgs(SourceRef):
    pass

class DeleteSourceArgs(SourceRef):
    pass

class CreateSourceArgs(SourceRef):
    content: str = Field(..., description=CREATE_SOURCE_CONTENT_HELP)

class ListSourcesArgs(BaseModel):
    org: str = Field(..., min_length=1, description="The organization")
    repo: str = Field(..., min_length=1, description="Name of the repository")
    path: str = Field("", description="Folder to list, relative to the repository root")

class UploadAssetArgs(BaseModel):
    org: str = Field(..., min_length=1, description="The organization")
    repo: str = Field(..., min_length=1, description="Name of the repository")
    path: str = Field(..., min_length=1, description="Destination path of the asset, including file name and extension")
    file_path: str = Field(..., min_length=1, description="Path of the asset on the local filesystem")
    content_type: Optional[str] = Field(None, description="MIME type; derived from the file extension when omitted")

class StageArgs(BaseModel):
    org: str = Field(..., min_length=1, description="The organization")
    repo: str = Field(..., min_length=1, description="Name of the repository")
    path: str = Field(..., min_length=1, description="Path of the resource to preview or publish")

# -----------------------
# Results
# -----------------------

class StepResult(BaseModel):
    step: str
    status: Literal["success", "skipped"]
    reason: Optional[str] = None
    status_code: Optional[int] = Field(None, serialization_alias="statusCode")

class UploadResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    path: str
    preview_url: str = Field(..., alias="previewUrl")
    live_url: str = Field(..., alias="liveUrl")
    content_type: str = Field(..., alias="contentType")
    size: int
    steps: List[StepResult] = []

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
