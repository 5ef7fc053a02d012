from dataclasses import dataclass, field

import pytest

from docvault.sync import (
    CredentialRequest,
    CredentialResolver,
    CredentialSource,
    Skip,
    SshCredential,
)


@dataclass
class RecordingProvider:
    """Credential provider that returns a fixed outcome and records requests."""

    outcome: SshCredential | Skip
    name: str = "recording"
    requests: list[CredentialRequest] = field(default_factory=list)

    def provide(self, request: CredentialRequest) -> SshCredential | Skip:
        self.requests.append(request)
        if isinstance(self.outcome, SshCredential):
            return SshCredential(
                username=request.username,
                source=self.outcome.source,
                private_key=self.outcome.private_key,
                public_key=self.outcome.public_key,
            )
        return self.outcome


@pytest.fixture
def agent_provider() -> RecordingProvider:
    return RecordingProvider(
        SshCredential(username="", source=CredentialSource.AGENT), name="agent"
    )


@pytest.fixture
def agent_resolver(agent_provider: RecordingProvider) -> CredentialResolver:
    """Resolver that always yields an agent credential."""
    return CredentialResolver([agent_provider])
