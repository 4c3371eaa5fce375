"""
Deployment Errors
One error class per failed step of the deployment sequence
"""


class DeploymentError(Exception):
    """Base class for every failure that aborts a deployment run"""


class ConfigurationError(DeploymentError):
    """Deployment configuration is missing or malformed"""


class IdentityResolutionError(DeploymentError):
    """No signer could be resolved from the environment"""


class ArtifactResolutionError(DeploymentError):
    """The contract's compiled artifact could not be found or is unusable"""


class SubmissionError(DeploymentError):
    """The node rejected the deployment transaction or was unreachable"""


class ConfirmationError(DeploymentError):
    """The deployment transaction was not confirmed (timeout, revert or reorg)"""
