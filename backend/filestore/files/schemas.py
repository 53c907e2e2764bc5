"""Pydantic schemas for the storage endpoints.

Field names match the JSON wire format exactly (``FileBody``, ``FileName``,
``Success``, ``Message``), so clients written against the original server
keep working unchanged:

- SaveRequest: base64 body plus target name
- DeleteRequest / ExtractRequest: target name only
- OperationResult: success flag and message for Save and Delete
- ExtractResult: OperationResult plus the base64 file body
"""
from pydantic import BaseModel, Field


class SaveRequest(BaseModel):
    """Request body for ``POST /SaveFileToStorage``."""
    FileBody: str = Field(..., description="Base64-encoded file content")
    FileName: str = Field(..., description="Name of the file under the storage root")


class DeleteRequest(BaseModel):
    """Request body for ``POST /DeleteFileInStorage``."""
    FileName: str = Field(..., description="Name of the file to delete")


class ExtractRequest(BaseModel):
    """Request body for ``POST /ExtractFromStorage``."""
    FileName: str = Field(..., description="Name of the file to read")


class OperationResult(BaseModel):
    """Successful result of Save or Delete.

    Failures never produce this model; they are rendered from a
    ``StorageError`` by the global exception handlers.
    """
    Success: bool = Field(True, description="Whether the operation succeeded")
    Message: str = Field("", description="Empty on success")


class ExtractResult(BaseModel):
    """Successful result of Extract."""
    FileBody: str = Field(..., description="Base64-encoded file content")
    Success: bool = Field(True, description="Whether the operation succeeded")
    Message: str = Field("", description="Empty on success")
