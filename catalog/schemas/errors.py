"""
Error body returned together with the failure alert headers.

Example HTTP error response:
    {
        "title": "A new author cannot already have an ID",
        "status": 400,
        "entityName": "author",
        "errorKey": "idexists",
        "message": "error.idexists",
        "params": "author"
    }
"""

from pydantic import BaseModel, ConfigDict, Field

from catalog.exceptions import BadRequestAlertException


class AlertErrorResponse(BaseModel):  # type: ignore[misc]
    model_config = ConfigDict(populate_by_name=True)

    title: str
    status: int
    entity_name: str = Field(alias="entityName")
    error_key: str = Field(alias="errorKey")
    message: str
    params: str

    @classmethod
    def from_exception(
        cls, ex: BadRequestAlertException
    ) -> "AlertErrorResponse":
        return cls(
            title=ex.message,
            status=ex.http_status,
            entity_name=ex.entity_name,
            error_key=ex.error_key,
            message=f"error.{ex.error_key}",
            params=ex.entity_name,
        )
