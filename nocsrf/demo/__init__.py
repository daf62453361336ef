"""Form sandbox demonstrating token generation and checking."""

from .sandbox import FormSandbox, SandboxResponse

__all__ = ["FormSandbox", "SandboxResponse"]
