"""
Deployment Runner Tests
Runs the full deployment sequence against mocked network collaborators
"""

import json
import pytest
from unittest.mock import AsyncMock, Mock

from blockchain.errors import (
    ArtifactNotFoundError,
    ConfirmationTimeoutError,
    DeploymentError,
    ProviderConnectionError,
    QueryError,
    RevertError,
    TransactionError
)
from deployer.models import DeploymentResult
from deployer.record_store import DeploymentRecordStore
from deployer.runner import DeploymentRunner

from .mocks import (
    CONTRACT_ADDRESS,
    DEPLOYER,
    OTHER_ACCOUNT,
    TX_HASH,
    make_contract,
    make_factory_loader,
    make_provider
)


class TestSuccessfulDeployment:
    """Runs where every step succeeds"""

    @pytest.mark.asyncio
    async def test_result_matches_stub_address(self, provider, factory_loader, network):
        """Result carries the deployed contract's address and exits 0"""
        runner = DeploymentRunner(provider, factory_loader, network)

        outcome = await runner.run()

        assert outcome.ok
        assert outcome.exit_code == 0
        assert outcome.error is None
        assert isinstance(outcome.result, DeploymentResult)
        assert outcome.result.contract_address == CONTRACT_ADDRESS
        assert outcome.result.deployer_address == DEPLOYER
        assert outcome.result.network == 'core_testnet2'

    @pytest.mark.asyncio
    async def test_steps_run_in_order(self, provider, factory_loader, contract, network):
        """Signer, balance, factory, deploy, confirm and smoke test are all used"""
        runner = DeploymentRunner(provider, factory_loader, network)

        await runner.run()

        provider.get_signer.assert_awaited_once()
        provider.get_balance.assert_awaited_once_with(DEPLOYER)
        factory_loader.assert_called_once()
        assert factory_loader.call_args[0][0] == 'SupplyChainTracker'
        contract.wait_for_deployment.assert_awaited_once()
        contract.owner.assert_awaited_once()
        contract.product_counter.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_logged_hash_matches_transaction(self, provider, factory_loader, network, log_messages):
        """Transaction hash in the summary is the deployment transaction's hash"""
        runner = DeploymentRunner(provider, factory_loader, network)

        outcome = await runner.run()

        assert outcome.result.transaction_hash == TX_HASH
        assert f"Transaction Hash: {TX_HASH}" in log_messages

    @pytest.mark.asyncio
    async def test_summary_lines(self, provider, factory_loader, network, log_messages):
        """Summary lists network, addresses and balance in CORE"""
        runner = DeploymentRunner(provider, factory_loader, network)

        await runner.run()

        assert "=== Deployment Summary ===" in log_messages
        assert "Network: Core Testnet 2" in log_messages
        assert f"Contract Address: {CONTRACT_ADDRESS}" in log_messages
        assert f"Deployer Address: {DEPLOYER}" in log_messages
        assert "Account balance: 5 CORE" in log_messages
        assert "Product counter: 0" in log_messages

    @pytest.mark.asyncio
    async def test_owner_mismatch_still_completes(self, provider, network, log_messages):
        """A different owner is reported but does not fail the run"""
        contract = make_contract(owner=OTHER_ACCOUNT)
        runner = DeploymentRunner(provider, make_factory_loader(contract), network)

        outcome = await runner.run()

        assert outcome.ok
        assert outcome.exit_code == 0
        assert any("differs from deployer" in m for m in log_messages)

    @pytest.mark.asyncio
    async def test_independent_runs(self, network):
        """Two runs produce two independent records"""
        first = DeploymentRunner(
            make_provider(),
            make_factory_loader(make_contract()),
            network
        )
        second = DeploymentRunner(
            make_provider(address=OTHER_ACCOUNT),
            make_factory_loader(make_contract(
                address='0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512',
                tx_hash='0x' + 'cd' * 32,
                owner=OTHER_ACCOUNT
            )),
            network
        )

        result_a = (await first.run()).result
        result_b = (await second.run()).result

        assert result_a is not result_b
        assert set(result_a.to_dict()) == set(result_b.to_dict())
        assert result_a.contract_address == CONTRACT_ADDRESS
        assert result_b.contract_address == '0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512'
        assert result_a.transaction_hash != result_b.transaction_hash
        assert result_b.deployer_address == OTHER_ACCOUNT

    @pytest.mark.asyncio
    async def test_same_runner_twice(self, provider, factory_loader, network):
        """Runner keeps no state between runs"""
        runner = DeploymentRunner(provider, factory_loader, network)

        first = await runner.run()
        second = await runner.run()

        assert first.ok and second.ok
        assert first.result is not second.result
        assert provider.get_signer.await_count == 2

    @pytest.mark.asyncio
    async def test_record_saved_when_store_configured(self, provider, factory_loader, network, tmp_path):
        """Result is written through the record store"""
        output = tmp_path / 'deployments.json'
        runner = DeploymentRunner(
            provider,
            factory_loader,
            network,
            record_store=DeploymentRecordStore(str(output))
        )

        outcome = await runner.run()

        saved = json.loads(output.read_text())
        assert saved['core_testnet2']['contractAddress'] == outcome.result.contract_address
        assert saved['core_testnet2']['deploymentHash'] == TX_HASH

    @pytest.mark.asyncio
    async def test_no_record_without_store(self, provider, factory_loader, network, tmp_path):
        """Console-only by default"""
        runner = DeploymentRunner(provider, factory_loader, network)

        await runner.run()

        assert list(tmp_path.iterdir()) == []


class TestFailedDeployment:
    """Runs that stop on the first failing step"""

    @pytest.mark.asyncio
    async def test_deploy_rejection(self, provider, network, log_messages):
        """Factory deploy failure exits 1 without a result"""
        factory = Mock()
        factory.deploy = AsyncMock(side_effect=TransactionError("insufficient funds for gas"))
        runner = DeploymentRunner(provider, Mock(return_value=factory), network)

        outcome = await runner.run()

        assert not outcome.ok
        assert outcome.exit_code == 1
        assert outcome.result is None
        assert isinstance(outcome.error, TransactionError)
        assert "=== Deployment Summary ===" not in log_messages

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_wrapped(self, provider, network):
        """Non-taxonomy errors are reported against the step they occurred in"""
        factory = Mock()
        factory.deploy = AsyncMock(side_effect=RuntimeError("boom"))
        runner = DeploymentRunner(provider, Mock(return_value=factory), network)

        outcome = await runner.run()

        assert outcome.exit_code == 1
        assert type(outcome.error) is DeploymentError
        assert outcome.error.step == 'deploy'
        assert isinstance(outcome.error.__cause__, RuntimeError)
        assert str(outcome.error.__cause__) == 'boom'

    @pytest.mark.asyncio
    async def test_no_provider(self, factory_loader, network):
        """Connection failure stops before anything is deployed"""
        provider = make_provider()
        provider.get_signer = AsyncMock(side_effect=ProviderConnectionError("unreachable"))
        runner = DeploymentRunner(provider, factory_loader, network)

        outcome = await runner.run()

        assert isinstance(outcome.error, ProviderConnectionError)
        factory_loader.assert_not_called()

    @pytest.mark.asyncio
    async def test_balance_query_failure(self, factory_loader, network):
        provider = make_provider()
        provider.get_balance = AsyncMock(side_effect=QueryError("rpc down", step='balance'))
        runner = DeploymentRunner(provider, factory_loader, network)

        outcome = await runner.run()

        assert isinstance(outcome.error, QueryError)
        assert outcome.error.step == 'balance'

    @pytest.mark.asyncio
    async def test_missing_artifact(self, provider, network):
        loader = Mock(side_effect=ArtifactNotFoundError("no artifact"))
        runner = DeploymentRunner(provider, loader, network)

        outcome = await runner.run()

        assert isinstance(outcome.error, ArtifactNotFoundError)
        assert outcome.exit_code == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize('error', [
        ConfirmationTimeoutError("not mined"),
        RevertError("reverted", tx_hash=TX_HASH)
    ])
    async def test_confirmation_failure(self, provider, network, error):
        contract = make_contract()
        contract.wait_for_deployment = AsyncMock(side_effect=error)
        runner = DeploymentRunner(provider, make_factory_loader(contract), network)

        outcome = await runner.run()

        assert outcome.error is error
        contract.owner.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_smoke_test_failure(self, provider, network, tmp_path):
        """A failing view call fails the run and nothing is saved"""
        contract = make_contract()
        contract.product_counter = AsyncMock(side_effect=QueryError("call reverted", step='verify'))
        output = tmp_path / 'deployments.json'
        runner = DeploymentRunner(
            provider,
            make_factory_loader(contract),
            network,
            record_store=DeploymentRecordStore(str(output))
        )

        outcome = await runner.run()

        assert outcome.exit_code == 1
        assert not output.exists()
