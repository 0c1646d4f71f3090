"""
Tests for the beacon proof bundle composer.

Synthetic Deneb and Electra blocks are built with the SSZ container types,
so every expected value is known independently of the proof code.
"""

import unittest
from unittest.mock import MagicMock

from state_proofs.api.beacon_client import BeaconBlockResponse
from state_proofs.config import FORK_LAYOUTS, get_layout
from state_proofs.main import (
    BeaconProofResult,
    build_beacon_proof,
    generate_beacon_proof,
    log_beacon_proof,
)
from state_proofs.ssz import (
    ContainerNode,
    InvalidLayout,
    compute_root_from_proof,
    decode_signed_block,
)

from tests.fixtures import (
    BLOCK_HASH,
    BLOCK_NUMBER,
    PROPOSER_INDEX,
    SLOT,
    STATE_ROOT,
    TIMESTAMP,
    make_deneb_block,
    make_electra_block,
    signed_block_bytes,
)


class TestBuildBeaconProof(unittest.TestCase):

    def test_deneb_block(self):
        block = make_deneb_block()
        result = build_beacon_proof(block, get_layout("deneb"))

        self.assertEqual(result.root, bytes(block.hash_tree_root()))
        self.assertEqual(result.leaf, STATE_ROOT)
        self.assertEqual(result.index, 6434)
        self.assertEqual(len(result.proof), 12)
        self.assertEqual(result.block_number, BLOCK_NUMBER)
        self.assertEqual(result.timestamp, TIMESTAMP)
        self.assertEqual(result.slot, SLOT)
        self.assertEqual(result.fork, "deneb")
        self.assertTrue(result.verify())

    def test_electra_block(self):
        block = make_electra_block()
        result = build_beacon_proof(block, get_layout("electra"))

        self.assertEqual(result.root, bytes(block.hash_tree_root()))
        self.assertEqual(result.leaf, STATE_ROOT)
        self.assertEqual(result.index, 6434)
        self.assertTrue(result.verify())

    def test_leaf_is_hash_of_payload_state_root_field(self):
        block = make_deneb_block(state_root=b"\xab" * 32)
        payload = block.body.execution_payload
        result = build_beacon_proof(block, get_layout("deneb"))

        self.assertEqual(result.leaf, bytes(payload.state_root.hash_tree_root()))
        self.assertEqual(result.leaf, b"\xab" * 32)

    def test_proof_siblings_match_container_roots(self):
        block = make_deneb_block()
        result = build_beacon_proof(block, get_layout("deneb"))
        body = block.body
        payload = body.execution_payload

        # the deepest sibling pairs state_root (2) with receipts_root (3)
        self.assertEqual(result.proof[-1], bytes(payload.receipts_root))
        self.assertEqual(result.branch()[0], bytes(payload.receipts_root))
        reconstructed = compute_root_from_proof(result.leaf, result.index, result.proof)
        self.assertEqual(reconstructed, bytes(block.hash_tree_root()))

    def test_metadata(self):
        block = make_deneb_block()
        result = build_beacon_proof(block, get_layout("deneb"))

        self.assertEqual(result.metadata["proof_length"], 12)
        self.assertEqual(result.metadata["proposer_index"], PROPOSER_INDEX)
        self.assertEqual(result.metadata["parent_root"], "0x" + "55" * 32)
        self.assertEqual(result.metadata["beacon_state_root"], "0x" + "66" * 32)
        self.assertEqual(result.metadata["execution_block_hash"], f"0x{BLOCK_HASH.hex()}")

    def test_layout_field_count_mismatch(self):
        with self.assertRaises(InvalidLayout):
            build_beacon_proof(make_deneb_block(), get_layout("electra"))
        with self.assertRaises(InvalidLayout):
            build_beacon_proof(make_electra_block(), get_layout("deneb"))

    def test_to_dict(self):
        result = build_beacon_proof(make_deneb_block(), get_layout("deneb"))
        data = result.to_dict()

        self.assertEqual(data["leaf"], f"0x{STATE_ROOT.hex()}")
        self.assertEqual(data["index"], 6434)
        self.assertEqual(len(data["proof"]), 12)
        self.assertEqual(data["branch"], list(reversed(data["proof"])))
        self.assertEqual(data["block_number"], BLOCK_NUMBER)
        self.assertEqual(data["fork"], "deneb")

    def test_log_beacon_proof(self):
        result = build_beacon_proof(make_deneb_block(), get_layout("deneb"))
        with self.assertLogs("state_proofs.main", level="INFO") as logs:
            self.assertTrue(log_beacon_proof(result))
        self.assertTrue(any("SSZ Beacon proof is valid: True" in line for line in logs.output))

    def test_tampered_result_does_not_verify(self):
        result = build_beacon_proof(make_deneb_block(), get_layout("deneb"))
        forged = BeaconProofResult(
            root=result.root,
            leaf=b"\x00" * 32,
            index=result.index,
            proof=result.proof,
            block_number=result.block_number,
            timestamp=result.timestamp,
        )
        self.assertFalse(forged.verify())


class TestGenerateBeaconProof(unittest.TestCase):

    def _client(self, data: bytes, version=None):
        client = MagicMock()
        client.get_block_ssz.return_value = BeaconBlockResponse(
            block_id="finalized", data=data, consensus_version=version
        )
        return client

    def test_fetch_decode_and_prove(self):
        client = self._client(signed_block_bytes("deneb"), "deneb")
        result = generate_beacon_proof(client, "finalized", "deneb")

        client.get_block_ssz.assert_called_once_with("finalized")
        self.assertEqual(result.leaf, STATE_ROOT)
        self.assertEqual(result.block_number, BLOCK_NUMBER)
        self.assertTrue(result.verify())

    def test_fulu_uses_electra_schema(self):
        client = self._client(signed_block_bytes("electra"), "fulu")
        result = generate_beacon_proof(client, "head", "fulu")
        self.assertEqual(result.fork, "fulu")
        self.assertTrue(result.verify())

    def test_node_without_version_header(self):
        client = self._client(signed_block_bytes("electra"))
        result = generate_beacon_proof(client, "head", "Electra")
        self.assertEqual(result.fork, "electra")

    def test_node_reports_other_fork(self):
        client = self._client(signed_block_bytes("deneb"), "electra")
        with self.assertRaises(InvalidLayout):
            generate_beacon_proof(client, "finalized", "deneb")

    def test_fork_is_required(self):
        client = self._client(signed_block_bytes("deneb"), "deneb")
        with self.assertRaises(InvalidLayout):
            generate_beacon_proof(client, "finalized", None)
        with self.assertRaises(InvalidLayout):
            generate_beacon_proof(client, "finalized", "capella")
        client.get_block_ssz.assert_not_called()

    def test_undecodable_bytes(self):
        client = self._client(b"\x01\x02\x03", "deneb")
        with self.assertRaises(ValueError):
            generate_beacon_proof(client, "finalized", "deneb")


class TestContainerNode(unittest.TestCase):

    def test_field_access(self):
        block = make_deneb_block()
        node = ContainerNode(block)

        self.assertEqual(node.type_name, "DenebBeaconBlock")
        self.assertEqual(node.field_count(), 5)
        self.assertEqual(int(node.field_at(0)), SLOT)
        self.assertEqual(node.container_at(4).field_count(), 12)
        self.assertEqual(node.merkle_root(), bytes(block.hash_tree_root()))
        self.assertEqual(bytes(node.backing.merkle_root()), node.merkle_root())

    def test_bad_positions(self):
        node = ContainerNode(make_deneb_block())
        with self.assertRaises(InvalidLayout):
            node.field_at(5)
        with self.assertRaises(InvalidLayout):
            node.container_at(0)

    def test_rejects_non_containers(self):
        with self.assertRaises(TypeError):
            ContainerNode(b"\x00" * 32)

    def test_decode_round_trip(self):
        signed = decode_signed_block(signed_block_bytes("deneb"), "deneb")
        self.assertEqual(signed.message.hash_tree_root(), make_deneb_block().hash_tree_root())
        with self.assertRaises(InvalidLayout):
            decode_signed_block(b"", "bellatrix")


class TestLayouts(unittest.TestCase):

    def test_builtin_layouts(self):
        self.assertEqual(FORK_LAYOUTS["deneb"].beacon_block_body_fields, 12)
        self.assertEqual(FORK_LAYOUTS["electra"].beacon_block_body_fields, 13)
        self.assertEqual(FORK_LAYOUTS["fulu"].beacon_block_body_fields, 13)
        self.assertEqual(
            FORK_LAYOUTS["deneb"].state_root_path(), [(4, 5), (9, 12), (2, 17)]
        )

    def test_get_layout_is_case_insensitive(self):
        self.assertIs(get_layout("ELECTRA"), FORK_LAYOUTS["electra"])


if __name__ == "__main__":
    unittest.main()
