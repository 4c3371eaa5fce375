"""
Deployment Orchestrator
Drives the single-contract deployment sequence from signer to confirmed address
"""

from enum import Enum
from typing import Sequence
from loguru import logger

from .exceptions import (
    DeploymentError,
    IdentityResolutionError,
    ArtifactResolutionError,
    SubmissionError,
    ConfirmationError
)
from .models import DeployedContract, Signer


class DeploymentState(Enum):
    START = 'start'
    IDENTITY_RESOLVED = 'identity_resolved'
    FACTORY_READY = 'factory_ready'
    SUBMITTED = 'submitted'
    CONFIRMED = 'confirmed'
    DONE = 'done'
    FAILED = 'failed'


class DeploymentOrchestrator:
    """
    Deploys one contract per run through injected collaborators:

    - account_provider: get_signers() -> ordered signers, first one deploys
    - factory_provider: get_contract_factory(name, signer) -> factory
    - network_provider: wait_for_confirmation(pending) -> confirmed handle

    Steps run strictly one after another. The first failure aborts the run
    and is raised to the caller, nothing is retried.
    """

    def __init__(
        self,
        account_provider,
        factory_provider,
        network_provider,
        contract_name: str,
        constructor_args: Sequence = ()
    ):
        """
        Initialize Deployment Orchestrator

        Args:
            account_provider: Source of signer identities
            factory_provider: Source of contract factories
            network_provider: Awaits confirmation of submitted deployments
            contract_name: Name of the compiled contract to deploy
            constructor_args: Arguments passed to the contract constructor
        """
        self.account_provider = account_provider
        self.factory_provider = factory_provider
        self.network_provider = network_provider
        self.contract_name = contract_name
        self.constructor_args = tuple(constructor_args)

        self.state = DeploymentState.START
        self.deployer = None
        self.pending = None
        self.contract = None

    async def run(self) -> DeployedContract:
        """
        Execute the deployment

        Returns:
            Confirmed contract handle

        Raises:
            IdentityResolutionError, ArtifactResolutionError,
            SubmissionError, ConfirmationError
        """
        if self.state != DeploymentState.START:
            raise DeploymentError(f"Deployment already ran (state: {self.state.value})")

        try:
            self.deployer = await self._resolve_deployer()
            self.state = DeploymentState.IDENTITY_RESOLVED
            logger.info(f"Deploying contracts with the account: {self.deployer.address}")

            factory = await self._step(
                ArtifactResolutionError,
                self.factory_provider.get_contract_factory,
                self.contract_name,
                self.deployer
            )
            self.state = DeploymentState.FACTORY_READY

            self.pending = await self._step(
                SubmissionError,
                factory.deploy,
                *self.constructor_args
            )
            self.state = DeploymentState.SUBMITTED
            logger.debug(f"Deployment transaction pending: {self.pending.tx_hash}")

            self.contract = await self._step(
                ConfirmationError,
                self.network_provider.wait_for_confirmation,
                self.pending
            )
            if not self.contract.is_confirmed or not self.contract.address:
                raise ConfirmationError(
                    f"Deployment {self.pending.tx_hash} returned without a confirmed address"
                )
            self.state = DeploymentState.CONFIRMED

        except Exception:
            self.state = DeploymentState.FAILED
            raise

        logger.info(f"{self.contract_name} contract deployed to: {self.contract.address}")
        self.state = DeploymentState.DONE

        return self.contract

    async def _resolve_deployer(self) -> Signer:
        """Pick the first available signer"""
        signers = await self._step(IdentityResolutionError, self.account_provider.get_signers)

        if not signers:
            raise IdentityResolutionError("No signer accounts available for deployment")

        return signers[0]

    @staticmethod
    async def _step(error_cls, func, *args):
        """
        Await one deployment step

        Taxonomy errors pass through untouched, anything else is wrapped into
        the error class of the step that failed.
        """
        try:
            return await func(*args)
        except DeploymentError:
            raise
        except Exception as e:
            raise error_cls(str(e) or e.__class__.__name__) from e
