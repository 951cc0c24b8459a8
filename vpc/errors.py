"""Exception hierarchy. Every error here is fatal for the run."""


class VpcError(RuntimeError):
    """Base class for all errors raised by the pipeline."""


class BranchUndefinedError(VpcError):
    """Raised when neither a pull request head ref nor a push ref is available."""


class PreviewUrlEmptyError(VpcError):
    """Raised when the deploy tool printed nothing usable on stdout."""


class ProjectNameEmptyError(VpcError):
    """Raised when the deployment's project name could not be resolved."""


class DeploymentIdEmptyError(VpcError):
    """Raised when `vercel inspect` output carries no deployment id."""


class CredentialsError(VpcError):
    """Raised when GitHub or Vercel rejects the configured token."""
