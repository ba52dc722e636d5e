"""Validation report for collecting and formatting billing issues."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """Represents a single validation issue.

    Attributes:
        severity: The severity level of the issue
        field: The field name that has the issue (e.g., "balance")
        message: Human-readable description of the issue
        value: The value that caused the issue
        context: Optional context information (e.g., invoice_id)
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        """Return string representation of the issue.

        Returns:
            Formatted string with severity, field, and message
        """
        context_str = ""
        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(context_parts)})"

        return f"[{self.severity.name}] {self.field}: {self.message}{context_str}"


class ValidationReport:
    """Collects and manages validation issues.

    Errors make a report invalid; warnings and info messages are
    disclosures that never block a caller.

    Example:
        >>> report = ValidationReport()
        >>> report.add_info("balance", "Balance is 1.40 EUR", Decimal("1.40"))
        >>> report.is_valid()
        True
        >>> report.summary()
        '1 info message(s)'
    """

    def __init__(self) -> None:
        """Initialize an empty validation report."""
        self.issues: List[ValidationIssue] = []

    def _count(self, severity: ValidationSeverity) -> int:
        return sum(1 for issue in self.issues if issue.severity == severity)

    def _filter(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == severity]

    @property
    def error_count(self) -> int:
        """Number of error-level issues."""
        return self._count(ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        """Number of warning-level issues."""
        return self._count(ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        """Number of info-level issues."""
        return self._count(ValidationSeverity.INFO)

    def is_valid(self) -> bool:
        """Check if validation passed (no errors).

        Returns:
            True if no errors are present, False otherwise
        """
        return self.error_count == 0

    def has_errors(self) -> bool:
        """Check if the report has any errors."""
        return self.error_count > 0

    def add_issue(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an issue of any severity to the report.

        Args:
            severity: Severity of the issue
            field: The field name related to the issue
            message: Human-readable description
            value: The value that triggered the issue
            context: Optional context information
        """
        self.issues.append(
            ValidationIssue(
                severity=severity,
                field=field,
                message=message,
                value=value,
                context=context,
            )
        )

    def add_error(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an error to the report."""
        self.add_issue(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add a warning to the report."""
        self.add_issue(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an info message to the report."""
        self.add_issue(ValidationSeverity.INFO, field, message, value, context)

    def get_errors(self) -> List[ValidationIssue]:
        """Get all error-level issues."""
        return self._filter(ValidationSeverity.ERROR)

    def get_warnings(self) -> List[ValidationIssue]:
        """Get all warning-level issues."""
        return self._filter(ValidationSeverity.WARNING)

    def get_info(self) -> List[ValidationIssue]:
        """Get all info-level issues."""
        return self._filter(ValidationSeverity.INFO)

    def messages(
        self, min_severity: ValidationSeverity = ValidationSeverity.INFO
    ) -> List[str]:
        """Get the messages of all issues at or above a severity.

        Args:
            min_severity: Lowest severity to include

        Returns:
            Messages in the order the issues were added
        """
        return [i.message for i in self.issues if i.severity >= min_severity]

    def merge(self, other: "ValidationReport") -> None:
        """Merge another validation report into this one."""
        self.issues.extend(other.issues)

    def summary(self) -> str:
        """Get a summary of the validation report.

        Returns:
            Summary string with counts of errors, warnings, and info messages
        """
        parts = []
        if self.error_count > 0:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count > 0:
            parts.append(f"{self.info_count} info message(s)")

        if not parts:
            return "No issues found"

        return ", ".join(parts)

    def format(self) -> str:
        """Format the validation report for display.

        Returns:
            Formatted string with all issues grouped by severity
        """
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]

        for title, issues in (
            ("ERRORS", self.get_errors()),
            ("WARNINGS", self.get_warnings()),
            ("INFO", self.get_info()),
        ):
            if issues:
                lines.append(f"\n{title}:")
                lines.extend(f"  - {issue}" for issue in issues)

        return "\n".join(lines)
