"""Dashboard snapshot supplied by the surrounding application.

The snapshot arrives in the dashboard's camelCase JSON; fields accept
either spelling.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MonthlyData(_CamelModel):
    month: str = Field(..., description="Short Portuguese month name, e.g. 'Out'")
    year: int
    revenue: float = 0
    goal: float = 0


class TeamMember(_CamelModel):
    id: str
    name: str
    total_revenue: float = 0
    monthly_goal: float = 0
    active: bool = True
    is_placeholder: bool = False

    @property
    def first_name(self) -> str:
        return self.name.split(" ")[0]


class KPI(_CamelModel):
    annual_goal: float = 0
    annual_realized: float = 0
    current_month_name: str = ""
    average_ticket: float = 0
    conversion_rate: float = 0
    total_sales_count: int = 0


class DashboardSnapshot(_CamelModel):
    company_name: str = ""
    kpis: KPI | None = None
    current_year_data: list[MonthlyData] = Field(default_factory=list)
    team: list[TeamMember] = Field(default_factory=list)
