from pydantic import BaseModel, Field, computed_field
from typing import List

class CsvImportOut(BaseModel):
    success_count: int = 0
    fail_count: int = 0
    errors: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def total_count(self) -> int:
        return self.success_count + self.fail_count

    @computed_field
    @property
    def has_errors(self) -> bool:
        return self.fail_count > 0

    def add_success(self) -> None:
        self.success_count += 1

    def add_failure(self, message: str) -> None:
        self.fail_count += 1
        self.errors.append(message)
