"""Module defining custom exceptions for brewstate."""

from __future__ import annotations

from typing import Any, Self

# Exit Codes
EXIT_USER_ERROR = 1
EXIT_SYSTEM_ERROR = 2
EXIT_BREW_ERROR = 3


class BrewError(Exception):
    """Base exception class with context propagation.

    All exceptions in brewstate should inherit from this class.
    Context is a dictionary that accumulates relevant information
    as the exception propagates up the call stack.

    Example:
        raise BrewError("An error occurred", context={"package": "foo"})

        # Or with context propagation
        try:
            ...
        except BrewError as e:
            raise e.with_context(operation="install")
    """
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def with_context(self, **new_context: Any) -> Self:
        """Returns the exception with updated context.

        Args:
            **new_context: Additional context to add to the exception.

        Returns:
            The same instance with merged context.
        """
        self.context.update(new_context)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Structured form used by the JSON command output."""
        return {
            "type": type(self).__name__,
            "msg": self.message,
            "context": {k: v for k, v in self.context.items() if v is not None},
        }

    def __str__(self) -> str:
        """String representation of the exception including context."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


class UserError(BrewError):
    """Errors caused by user actions or inputs.

    These errors indicate that the user has made a mistake or provided
    invalid input, and should not be retried without correction.

    CLI should display helpful messages to guide the user.
    """
    pass


class SystemError(BrewError):
    """Errors due to system-level issues.

    These errors indicate problems with the system environment, such as
    a missing brew executable or output brew should never produce.

    CLI should display diagnostic information for troubleshooting.
    """
    pass


class DiagnosticError(BrewError):
    """An error whose message is brew's own diagnostic text.

    The diagnostic is the only actionable detail, so ``str()`` returns it
    unmodified and the package/kind live in ``context`` only.
    """
    def __init__(
        self,
        msg: str,
        package: str | None = None,
        kind: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if package:
            ctx["package"] = package
        if kind:
            ctx["kind"] = kind

        super().__init__(msg, context=ctx)

    @property
    def msg(self) -> str:
        return self.message

    def __str__(self) -> str:
        return self.message


## Classification ##

class PackageCreateError(DiagnosticError, UserError):
    """brew could not classify the package (``brew info`` failed).

    Usually an unknown name, or a name that is ambiguous without a kind.
    """
    pass


class InstalledPackageCreateError(DiagnosticError, UserError):
    """An installed package was required but could not be produced.

    Raised chained to the PackageCreateError when classification failed.
    """
    pass


class NotInstalledError(InstalledPackageCreateError):
    """Classification succeeded but the package is not installed."""
    def __init__(
        self,
        msg: str | None = None,
        package: str | None = None,
        kind: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        if msg is None:
            msg = f"The package '{package or 'unknown'}' is not installed"

        super().__init__(msg, package=package, kind=kind, context=context)


class AlreadyInstalledError(DiagnosticError, UserError):
    """Classification succeeded but the package is already installed."""
    def __init__(
        self,
        msg: str | None = None,
        package: str | None = None,
        kind: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        if msg is None:
            msg = f"The package '{package or 'unknown'}' is already installed"

        super().__init__(msg, package=package, kind=kind, context=context)


## Transitions ##

class TransitionError(DiagnosticError):
    """A state-changing brew command exited with a non-zero status."""
    pass


class InstallError(TransitionError):
    """``brew install`` failed."""
    pass


class UnInstallError(TransitionError):
    """``brew uninstall`` failed."""
    pass


class ReInstallError(TransitionError):
    """``brew reinstall`` failed."""
    pass


## Tool failures ##

class BrewCommandError(BrewError):
    """Brew command returned a non-zero exit code.

    Used for read-only queries (listing, searching) whose failure is not
    part of the package-state taxonomy.
    """
    def __init__(
        self,
        message: str | None = None,
        command: str | None = None,
        returncode: int | None = None,
        error: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        """Initialise BrewCommandError with detailed context.

        Args:
            message: Optional custom error message.
            command: The brew command that was executed.
            returncode: The exit code returned by the command.
            error: The error output from the command.
            context: Additional context information.
        """
        ctx = context or {}
        if command:
            ctx["command"] = command
        if returncode is not None:
            ctx["returncode"] = returncode
        if error:
            ctx["error"] = error

        if message is None:
            message = f"Brew command failed with exit code {returncode if returncode is not None else 'unknown'}"

        super().__init__(message, context=ctx)


class BrewContractError(SystemError):
    """brew produced output it never should.

    Invalid UTF-8, invalid JSON, missing fields, or an info response with
    no entries after a successful exit. This is not an expected failure
    mode, so callers should let it abort the operation.
    """
    def __init__(
        self,
        message: str,
        command: str | None = None,
        output_preview: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        if output_preview:
            ctx["output_preview"] = output_preview

        super().__init__(message, context=ctx)


class BrewExecutableError(SystemError):
    """The brew executable could not be started."""
    def __init__(
        self,
        message: str | None = None,
        path: str | None = None,
        context: dict[str, Any] | None = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path

        if message is None:
            message = f"Could not run brew at '{path or 'brew'}'"

        super().__init__(message, context=ctx)


# CLI Error Message Templates

ERROR_TEMPLATES = {
    PackageCreateError: (
        "❌ Package lookup failed: {package}\n"
        "{message}"
    ),
    NotInstalledError: (
        "❌ {message}"
    ),
    AlreadyInstalledError: (
        "❌ {message}"
    ),
    InstalledPackageCreateError: (
        "❌ Package lookup failed: {package}\n"
        "{message}"
    ),
    InstallError: (
        "⚠️ Install failed: {package} ({kind})\n"
        "{message}"
    ),
    UnInstallError: (
        "⚠️ Uninstall failed: {package} ({kind})\n"
        "{message}"
    ),
    ReInstallError: (
        "⚠️ Reinstall failed: {package} ({kind})\n"
        "{message}"
    ),
    BrewCommandError: (
        "⚠️ Brew command failed: {command}\n"
        "   Exit Code: {returncode}\n"
        "   Error: {error}"
    ),
    BrewExecutableError: (
        "⚠️ {message}\n"
        "   Fix: Install Homebrew or set BREWSTATE_BREW to the brew executable"
    ),
    BrewContractError: (
        "⚠️ Unexpected output from brew: {message}\n"
        "   Command: {command}"
    ),
    UserError: (
        "❌ {message}"
    ),
    SystemError: (
        "⚠️ System error: {message}\n"
        "   Please check your system configuration and try again"
    ),
    BrewError: (
        "❌ {message}"
    ),
}


def format_error_message(error: BrewError) -> str:
    """Formats an error message for CLI display based on the error type.

    Falls back along the class hierarchy until a template matches.

    Args:
        error: The BrewError instance to format.

    Returns:
        A formatted string message for CLI display.
    """
    template = next(
        (ERROR_TEMPLATES[cls] for cls in type(error).__mro__ if cls in ERROR_TEMPLATES),
        ERROR_TEMPLATES[BrewError],
    )
    try:
        return template.format(message=error.message, **error.context)
    except KeyError:
        return f"❌ {error.message}"


def suggest_search(package_name: str) -> str:
    """Suggest a search command for a missing package.

    Args:
        package_name: The name of the missing package.

    Returns:
        Formatted search suggestion string.
    """
    return (
        f"\n💡 Suggestions:\n"
        f"   • Try 'brewstate search {package_name}'\n"
        "   • Pass --kind formula or --kind cask if the name is ambiguous\n"
        "   • Visit https://formulae.brew.sh/ to browse available packages\n"
    )


def exit_code_for(error: BaseException) -> int:
    """Map an exception to the CLI exit code."""
    if isinstance(error, TransitionError):
        return EXIT_BREW_ERROR
    if isinstance(error, BrewCommandError):
        return EXIT_BREW_ERROR
    if isinstance(error, UserError):
        return EXIT_USER_ERROR
    return EXIT_SYSTEM_ERROR
