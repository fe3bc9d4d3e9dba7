"""
Unit tests for the liquidity module

All chain access goes through a mocked ChainGateway; the signer is a
real local account.
"""

import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from eth_abi import decode

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pharos_lp_adapter.errors import GasEstimationError, TransactionError
from pharos_lp_adapter.modules.liquidity import LiquidityModule, apply_gas_buffer
from pharos_lp_adapter.protocols.router.api import MINT_PARAMS_TYPE
from pharos_lp_adapter.types import ReceiptPoll
from fakes import (
    ONE,
    ROUTER,
    TX_HASH,
    USDC,
    USDT,
    WPHRS,
    make_gateway,
    make_lp_config,
    make_registry,
    make_signer,
    make_tx_config,
    reverted_receipt,
    success_receipt,
)

NOW = 1_700_000_000


def _module(gateway):
    return LiquidityModule(
        gateway,
        make_signer(),
        make_registry(),
        lp_config=make_lp_config(),
        tx_config=make_tx_config(),
    )


def _decode_mint(tx_request):
    """Decode the mint struct out of multicall([mint, refundETH]) calldata"""
    data = bytes.fromhex(tx_request["data"][2:])
    (calls,) = decode(["bytes[]"], data[4:])
    (params,) = decode([MINT_PARAMS_TYPE], calls[0][4:])
    return params


def _mint_call(gateway):
    """The last broadcast request (the mint)"""
    tx_request, _ = gateway.broadcast.await_args.args
    return tx_request


class TestApplyGasBuffer(unittest.TestCase):
    """Tests for the gas safety margin"""

    def test_default_fallback(self):
        self.assertEqual(apply_gas_buffer(500_000, 1.2), 600_000)

    def test_estimate_is_scaled_exactly(self):
        self.assertEqual(apply_gas_buffer(215_431, 1.2), 258_517)

    def test_identity(self):
        self.assertEqual(apply_gas_buffer(21_000, 1.0), 21_000)


class TestAddLiquidity(unittest.IsolatedAsyncioTestCase):
    """Tests for LiquidityModule.add_liquidity"""

    @patch("pharos_lp_adapter.modules.liquidity.time.time", return_value=NOW)
    async def test_phrs_usdt_happy_path(self, _time):
        gateway = make_gateway()
        module = _module(gateway)

        result = await module.add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertEqual(result, TX_HASH)
        gateway.broadcast.assert_awaited_once()

        tx_request = _mint_call(gateway)
        self.assertEqual(tx_request["to"], ROUTER)
        self.assertEqual(tx_request["from"], make_signer().address)
        self.assertEqual(tx_request["value"], 1_500_000_000_000_000_000)
        self.assertEqual(tx_request["gas"], 240_000)
        self.assertTrue(tx_request["data"].startswith("0xac9650d8"))

        params = _decode_mint(tx_request)
        self.assertEqual(params[0].lower(), WPHRS.lower())
        self.assertEqual(params[1].lower(), USDT.lower())
        self.assertEqual(params[2], 500)
        self.assertEqual((params[3], params[4]), (-887220, 887220))
        self.assertEqual(params[5], 1_500_000_000_000_000_000)
        self.assertEqual(params[6], 3_000_000_000_000_000_000)
        self.assertEqual((params[7], params[8]), (0, 0))
        self.assertEqual(params[9].lower(), make_signer().address.lower())
        self.assertEqual(params[10], NOW + 1800)

    @patch("pharos_lp_adapter.modules.liquidity.time.time", return_value=NOW)
    async def test_caller_order_does_not_change_calldata(self, _time):
        forward = make_gateway()
        await _module(forward).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        reverse = make_gateway()
        await _module(reverse).add_liquidity("USDT", "PHRS", "3.0", "1.5")

        self.assertEqual(_mint_call(forward)["data"], _mint_call(reverse)["data"])
        self.assertEqual(_mint_call(reverse)["value"], 1_500_000_000_000_000_000)

    async def test_non_native_pair_sends_no_value(self):
        gateway = make_gateway()
        result = await _module(gateway).add_liquidity("USDC", "USDT", "10", "10")

        self.assertEqual(result, TX_HASH)
        tx_request = _mint_call(gateway)
        self.assertEqual(tx_request["value"], 0)
        params = _decode_mint(tx_request)
        self.assertEqual(params[0].lower(), USDC.lower())

    async def test_native_value_when_wphrs_is_token1(self):
        gateway = make_gateway()
        await _module(gateway).add_liquidity("PHRS", "USDC", "2", "7")

        tx_request = _mint_call(gateway)
        params = _decode_mint(tx_request)
        # USDC sorts below WPHRS
        self.assertEqual(params[1].lower(), WPHRS.lower())
        self.assertEqual(params[6], 2 * ONE)
        self.assertEqual(tx_request["value"], 2 * ONE)

    async def test_unknown_symbol_touches_no_gateway(self):
        gateway = make_gateway()

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="ERROR") as captured:
            result = await _module(gateway).add_liquidity("DOGE", "USDT", "1", "1")

        self.assertIsNone(result)
        self.assertIn("Invalid token pair: DOGE-USDT", captured.output[0])
        gateway.read_allowance.assert_not_awaited()
        gateway.estimate_gas.assert_not_awaited()
        gateway.broadcast.assert_not_awaited()

    async def test_invalid_amount_returns_none(self):
        gateway = make_gateway()

        self.assertIsNone(await _module(gateway).add_liquidity("PHRS", "USDT", "abc", "1"))
        gateway.broadcast.assert_not_awaited()

    async def test_amount_above_uint256_sends_nothing(self):
        gateway = make_gateway()

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="ERROR") as captured:
            result = await _module(gateway).add_liquidity("PHRS", "USDT", "1e80", "1")

        self.assertIsNone(result)
        self.assertTrue(any("exceeds uint256" in line for line in captured.output))
        gateway.read_allowance.assert_not_awaited()
        gateway.estimate_gas.assert_not_awaited()
        gateway.broadcast.assert_not_awaited()

    async def test_same_token_returns_none(self):
        gateway = make_gateway()

        self.assertIsNone(await _module(gateway).add_liquidity("USDT", "usdt", "1", "1"))
        gateway.broadcast.assert_not_awaited()

    async def test_estimation_failure_falls_back_to_buffered_default(self):
        gateway = make_gateway(estimate=GasEstimationError("execution reverted"))

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="WARNING") as captured:
            result = await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertEqual(result, TX_HASH)
        self.assertEqual(_mint_call(gateway)["gas"], 600_000)
        self.assertTrue(any("falling back to 500000" in line for line in captured.output))

    async def test_unexpected_estimation_error_also_falls_back(self):
        gateway = make_gateway(estimate=RuntimeError("connection reset"))

        await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertEqual(_mint_call(gateway)["gas"], 600_000)

    async def test_reverted_mint_returns_none(self):
        gateway = make_gateway(polls=[ReceiptPoll.found(reverted_receipt())])

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="ERROR") as captured:
            result = await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertIsNone(result)
        self.assertEqual(gateway.poll_receipt.await_count, 1)
        self.assertTrue(any("Failed to confirm liquidity transaction" in line for line in captured.output))
        self.assertTrue(any(f"{TX_HASH} (reverted on-chain)" in line for line in captured.output))

    async def test_unconfirmed_mint_returns_none(self):
        polls = [ReceiptPoll.transient("not ready", rpc_code=-32008) for _ in range(5)]
        gateway = make_gateway(polls=polls)

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="ERROR") as captured:
            result = await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertIsNone(result)
        self.assertEqual(gateway.poll_receipt.await_count, 5)
        self.assertTrue(any("outcome unknown, may still land" in line for line in captured.output))
        self.assertFalse(any("(reverted on-chain)" in line for line in captured.output))

    async def test_broadcast_failure_returns_none(self):
        gateway = make_gateway(tx_hash=TransactionError.send_failed(RuntimeError("nonce too low")))

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="ERROR") as captured:
            result = await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertIsNone(result)
        self.assertTrue(any("Error adding liquidity" in line for line in captured.output))

    async def test_both_approvals_precede_mint(self):
        approve0, approve1 = "0x" + "01" * 32, "0x" + "02" * 32
        gateway = make_gateway(allowance=0, tx_hash=[approve0, approve1, TX_HASH])

        result = await _module(gateway).add_liquidity("USDT", "PHRS", "3.0", "1.5")

        self.assertEqual(result, TX_HASH)
        self.assertEqual(gateway.broadcast.await_count, 3)
        requests = [call.args[0] for call in gateway.broadcast.await_args_list]
        # token0 (WPHRS) first, then token1 (USDT), then the mint
        self.assertEqual(requests[0]["to"], WPHRS)
        self.assertEqual(requests[1]["to"], USDT)
        self.assertEqual(requests[2]["to"], ROUTER)
        for call in gateway.read_allowance.await_args_list:
            self.assertEqual(call.args[1], ROUTER)

    async def test_failed_first_approval_skips_second_and_mint(self):
        gateway = make_gateway(
            allowance=0,
            tx_hash=TransactionError.send_failed(RuntimeError("insufficient funds")),
        )

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="ERROR") as captured:
            result = await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        self.assertIsNone(result)
        self.assertEqual(gateway.read_allowance.await_count, 1)
        self.assertEqual(gateway.broadcast.await_count, 1)
        self.assertTrue(any("Token approval failed for PHRS-USDT" in line for line in captured.output))

    async def test_log_lines_carry_actor_and_correlation(self):
        gateway = make_gateway()

        with self.assertLogs("pharos_lp_adapter.modules.liquidity", level="INFO") as captured:
            await _module(gateway).add_liquidity("PHRS", "USDT", "1.5", "3.0")

        messages = [record.getMessage() for record in captured.records]
        self.assertTrue(all(m.startswith("System | TestWallet | [lp_") for m in messages))
        cids = {record.correlation_id for record in captured.records}
        self.assertEqual(len(cids), 1)
        self.assertTrue(any(f"Liquidity added successfully: {TX_HASH}" in m for m in messages))


class TestBuildMintParams(unittest.TestCase):
    """Tests for parameter construction helpers"""

    def test_deadline_window(self):
        from pharos_lp_adapter.types import canonical_order

        module = _module(make_gateway())
        with patch("pharos_lp_adapter.modules.liquidity.time.time", return_value=NOW + 0.9):
            params = module.build_mint_params(canonical_order(WPHRS, USDT), 1, 2)

        self.assertEqual(params.deadline, NOW + 1800)
        self.assertEqual(params.recipient, make_signer().address)
        self.assertEqual(module.native_value(params), 1)


if __name__ == "__main__":
    unittest.main()
