import json

import pytest
from click.testing import CliRunner

from nethermind.clmm import ClmmPool
from nethermind.clmm.cli import clmm_cli
from nethermind.clmm.utils import address_sort_key


@pytest.fixture(name="cli_state_config")
def fixture_cli_state_config(random_address):
    def _cli_state_config(signer: str | None = None) -> list[str]:
        return ["--state-file", "pool_state.json", "--signer", signer or random_address()]

    return _cli_state_config


@pytest.fixture(name="cli_token_config")
def fixture_cli_token_config(random_address):
    mint_0, mint_1 = sorted([random_address(), random_address()], key=address_sort_key)
    return ["--token-0", mint_0, "--token-1", mint_1, "--symbol-0", "TST0", "--symbol-1", "TST1"]


class TestMathCommands:
    def test_price_at_tick(self):
        runner = CliRunner()
        result = runner.invoke(clmm_cli, ["math", "price-at-tick", "100"])

        assert result.exit_code == 0
        assert result.output.strip() == "18539204128674375874"

    def test_price_at_negative_tick(self):
        runner = CliRunner()
        result = runner.invoke(clmm_cli, ["math", "price-at-tick", "--", "-100"])

        assert result.exit_code == 0
        assert result.output.strip() == "18354745142194513203"

    def test_price_at_tick_out_of_range(self):
        runner = CliRunner()
        result = runner.invoke(clmm_cli, ["math", "price-at-tick", "443637"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_tick_at_price(self):
        runner = CliRunner()
        result = runner.invoke(clmm_cli, ["math", "tick-at-price", "18539204128674375875"])

        assert result.exit_code == 0
        assert result.output.strip() == "100"

    def test_amounts_for_adding_liquidity(self):
        runner = CliRunner()
        result = runner.invoke(
            clmm_cli,
            ["math", "amounts", "--tick-lower=-100", "--tick-upper", "100", "--liquidity", "1000000", "--tick", "0"],
        )

        assert result.exit_code == 0
        assert "amount_0: 4988" in result.output
        assert "amount_1: 4988" in result.output

    def test_amounts_for_removing_liquidity(self):
        runner = CliRunner()
        result = runner.invoke(
            clmm_cli,
            [
                "math",
                "amounts",
                "--tick-lower=-100",
                "--tick-upper=100",
                "--liquidity=-1000000",
                f"--sqrt-price={2**64}",
            ],
        )

        assert result.exit_code == 0
        assert "amount_0: -4987" in result.output
        assert "amount_1: -4987" in result.output

    def test_amounts_requires_one_price_option(self):
        runner = CliRunner()
        result = runner.invoke(
            clmm_cli,
            ["math", "amounts", "--tick-lower=-100", "--tick-upper=100", "--liquidity=1000000"],
        )

        assert result.exit_code == 2
        assert "Exactly one of --tick or --sqrt-price" in result.output


class TestPoolCommands:
    def test_create_pool(self, cli_state_config, cli_token_config):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(clmm_cli, ["pool", "create", *cli_state_config(), *cli_token_config])
            assert result.exit_code == 0, result.output
            assert "Created Pool" in result.output

            with open("pool_state.json", "r") as f:
                pool_state = json.load(fp=f)

            account_types = [account["type"] for account in pool_state["accounts"].values()]
            assert sorted(account_types) == ["AmmConfig", "ObservationState", "PoolState"]

            with open("pool_state.json", "r") as f:
                pool = ClmmPool.load_pool(f)

            assert pool.state.tick_current == 0
            assert pool.state.tick_spacing == 60
            assert pool.amm_config.trade_fee_rate == 2500

    def test_create_pool_with_fee_tier(self, cli_state_config, cli_token_config):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                clmm_cli,
                ["pool", "create", *cli_state_config(), *cli_token_config, "--fee", "500", "--tick-spacing", "10"],
            )
            assert result.exit_code == 0, result.output

            with open("pool_state.json", "r") as f:
                pool = ClmmPool.load_pool(f)

            assert pool.state.tick_spacing == 10
            assert pool.amm_config.trade_fee_rate == 500

    def test_create_pool_with_unsorted_mints(self, cli_state_config, random_address):
        mint_0, mint_1 = sorted([random_address(), random_address()], key=address_sort_key)
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(
                clmm_cli,
                ["pool", "create", *cli_state_config(), "--token-0", mint_1, "--token-1", mint_0],
            )
            assert result.exit_code == 1

    def test_pool_info(self, cli_state_config, cli_token_config):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(clmm_cli, ["pool", "create", *cli_state_config(), *cli_token_config])
            result = runner.invoke(clmm_cli, ["pool", "info", "--state-file", "pool_state.json"])

            assert result.exit_code == 0, result.output
            assert "Active Liquidity" in result.output
            assert "Sqrt Price X64" in result.output

    def test_info_requires_existing_state_file(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(clmm_cli, ["pool", "info", "--state-file", "missing.json"])
            assert result.exit_code == 1
            assert "does not exist" in result.output

    def test_open_position(self, cli_state_config, cli_token_config, random_address):
        owner = random_address()
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(clmm_cli, ["pool", "create", *cli_state_config(), *cli_token_config])
            result = runner.invoke(
                clmm_cli,
                [
                    "pool",
                    "open-position",
                    *cli_state_config(owner),
                    "--tick-lower=-120",
                    "--tick-upper=120",
                    "--liquidity=1000000",
                    "--amount-0-max=100000",
                    "--amount-1-max=100000",
                ],
            )

            assert result.exit_code == 0, result.output
            assert "Opened Position" in result.output

            with open("pool_state.json", "r") as f:
                pool = ClmmPool.load_pool(f)

            assert pool.state.liquidity == 1_000_000
            assert list(pool.ticks.keys()) == [-120, 120]
            assert pool.store.events[-1].nft_owner == owner

    def test_open_position_above_token_maximum(self, cli_state_config, cli_token_config):
        runner = CliRunner()
        with runner.isolated_filesystem():
            runner.invoke(clmm_cli, ["pool", "create", *cli_state_config(), *cli_token_config])
            result = runner.invoke(
                clmm_cli,
                [
                    "pool",
                    "open-position",
                    *cli_state_config(),
                    "--tick-lower=-120",
                    "--tick-upper=120",
                    "--liquidity=1000000",
                    "--amount-0-max=1",
                    "--amount-1-max=1",
                ],
            )

            assert result.exit_code == 1

            with open("pool_state.json", "r") as f:
                pool = ClmmPool.load_pool(f)
            assert pool.state.liquidity == 0
