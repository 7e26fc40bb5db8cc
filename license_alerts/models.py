from dataclasses import dataclass, field
from datetime import date, datetime


def parse_timestamp(value) -> datetime | None:
    """ISO-8601 from PostgREST ("Z" suffix included) to datetime."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


@dataclass
class License:
    id: str
    name: str
    vendor: str
    expiration_date: str  # ISO date as stored
    account_id: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "License":
        return cls(
            id=row["id"],
            name=row.get("name") or "",
            vendor=row.get("vendor") or "",
            expiration_date=row.get("expiration_date") or "",
            account_id=row.get("account_id"),
        )


@dataclass
class Account:
    id: str
    name: str
    slug: str

    @classmethod
    def from_row(cls, row: dict) -> "Account":
        return cls(id=row["id"], name=row.get("name") or "", slug=row.get("slug") or "")


@dataclass
class Administrator:
    user_id: str
    email: str | None

    @classmethod
    def from_row(cls, row: dict) -> "Administrator":
        user = row.get("users") or {}
        return cls(user_id=row.get("user_id", ""), email=user.get("email"))


@dataclass
class ExpirationAlert:
    id: str
    license_id: str
    account_id: str
    alert_type: str  # "30_day" | "7_day"
    sent_at: datetime | None
    license: License | None = None

    @property
    def is_urgent(self) -> bool:
        return self.alert_type == "7_day"

    @classmethod
    def from_row(cls, row: dict) -> "ExpirationAlert":
        lic = row.get("software_licenses")
        return cls(
            id=row["id"],
            license_id=row.get("license_id", ""),
            account_id=row.get("account_id", ""),
            alert_type=row.get("alert_type", ""),
            sent_at=parse_timestamp(row.get("sent_at")),
            license=License.from_row(lic) if lic else None,
        )


@dataclass
class ExecutionLog:
    id: str
    started_at: datetime | None
    completed_at: datetime | None
    duration_ms: int
    alerts_created: int
    status: str  # "success" | "error"
    error_message: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "ExecutionLog":
        return cls(
            id=str(row.get("id", "")),
            started_at=parse_timestamp(row.get("started_at")),
            completed_at=parse_timestamp(row.get("completed_at")),
            duration_ms=int(row.get("duration_ms") or 0),
            alerts_created=int(row.get("alerts_created") or 0),
            status=row.get("status") or "",
            error_message=row.get("error_message"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_ms": self.duration_ms,
            "alerts_created": self.alerts_created,
            "status": self.status,
            "error_message": self.error_message,
        }


@dataclass
class CheckStats:
    total_checks: int = 0
    successful_checks: int = 0
    failed_checks: int = 0
    total_alerts_created: int = 0
    average_duration_ms: float = 0
    last_check_at: str | None = None

    @classmethod
    def from_row(cls, row: dict) -> "CheckStats":
        return cls(
            total_checks=int(row.get("total_checks") or 0),
            successful_checks=int(row.get("successful_checks") or 0),
            failed_checks=int(row.get("failed_checks") or 0),
            total_alerts_created=int(row.get("total_alerts_created") or 0),
            average_duration_ms=float(row.get("average_duration_ms") or 0),
            last_check_at=row.get("last_check_at"),
        )


# --- results shared by the workflow steps ---

@dataclass
class CheckResult:
    success: bool
    duration_ms: int | None = None
    alerts_created: int = 0
    status: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.success


@dataclass
class ProcessResult:
    success: bool
    total_alerts: int = 0
    processed_alerts: int = 0
    emails_sent: int = 0
    emails_failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.success and self.emails_failed == 0


@dataclass
class StepResult:
    name: str
    success: bool
    error: str | None = None
    detail: CheckResult | ProcessResult | None = None


@dataclass
class WorkflowResult:
    check: StepResult
    notify: StepResult | None
    duration_ms: int

    @property
    def success(self) -> bool:
        return self.check.success and self.notify is not None and self.notify.success

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1
