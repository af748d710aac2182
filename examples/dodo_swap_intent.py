#!/usr/bin/env python3
"""
Example: swap 1 USDC for USDT through DODO as a SpiceFlow intent on Pharos.
"""
import logging
import os

from spiceflow_sdk import (
    DodoRouteClient,
    DodoRouteRequest,
    NetworkConfig,
    SpiceFlowClient,
    SpiceFlowConfig,
    StepStatus,
    build_swap_calls,
)


def main():
    """
    Demonstrate the full intent flow.

    This example shows how to:
    1. Build a config from the bundled network presets
    2. Ask DODO for a route and turn it into approve + swap calls
    3. Hash the batch and sign two EIP-7702 delegations
    4. Submit the intent and wait for step 0
    """
    logging.basicConfig(level=logging.INFO)

    PRIVATE_KEY = os.environ.get("PRIVATE_KEY")
    DELEGATE_CONTRACT = os.environ.get("DELEGATE_CONTRACT")
    DODO_API_KEY = os.environ.get("DODO_API_KEY")
    TX_API_URL = os.environ.get("SPICEFLOW_TX_API_URL")
    NETWORK = os.environ.get("SPICEFLOW_NETWORK", "pharos-fork")

    if not all([PRIVATE_KEY, DELEGATE_CONTRACT, DODO_API_KEY, TX_API_URL]):
        print("ERROR: PRIVATE_KEY, DELEGATE_CONTRACT, DODO_API_KEY and SPICEFLOW_TX_API_URL are required")
        return

    config = SpiceFlowConfig.from_networks(NETWORK, tx_api_url=TX_API_URL, delegate_address=DELEGATE_CONTRACT)
    chain_id = NetworkConfig.get_chain_id(NETWORK)
    usdc = NetworkConfig.get_token(NETWORK, "USDC")
    usdt = NetworkConfig.get_token(NETWORK, "USDT")
    amount = 1 * 10 ** usdc.decimals

    with SpiceFlowClient(config, priv_key=PRIVATE_KEY) as client:
        print(f"Wallet: {client.address}")
        client.chain_client.verify_chain_id(chain_id)

        route = DodoRouteClient(DODO_API_KEY).get_route(DodoRouteRequest(
            from_token_address=usdc.address,
            from_token_decimals=usdc.decimals,
            to_token_address=usdt.address,
            to_token_decimals=usdt.decimals,
            from_amount=amount,
            user_addr=client.address,
            chain_id=chain_id,
            rpc=config.rpc_url_for_chain(chain_id),
        ))
        calls = build_swap_calls(route, usdc.address, amount)

        chain_authorizations, digest = client.build_chain_batches([{"chainId": chain_id, "calls": calls}])
        print(f"Intent digest: 0x{digest.hex()}")

        # Two delegations on the same chain consume nonce n and n + 1
        authorization = client.sign_delegations([chain_id, chain_id])

        submitted = client.submit_intent(chain_authorizations, authorization, usdc.address, amount)
        print(f"Intent submitted: {submitted.intent_id}")

        final = client.wait_for_step(
            submitted.intent_id,
            on_update=lambda s: print(f"Step status: {s.data.status.value}")
        )
        if final.data.status == StepStatus.SUCCESS:
            print(f"Step 0 succeeded, tx: {final.data.transaction_hash}")
        else:
            print(f"Step 0 reverted, tx: {final.data.transaction_hash}")


if __name__ == "__main__":
    main()
