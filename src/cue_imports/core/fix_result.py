"""
Data structures representing the outcome of fixing one file.

The `FixResult` Pydantic model is what the batch runner collects per file to
decide what to write and what to report.
"""

from typing import List

from pydantic import BaseModel, Field


class FixResult(BaseModel):
  """
  Container for the result of running the engine on one file.
  """

  path: str = Field(description="The file that was processed.")
  changed: bool = Field(default=False, description="True if the fixed content differs from the input.")
  errors: List[str] = Field(default_factory=list, description="Error messages encountered.")

  @property
  def success(self) -> bool:
    return not self.errors
