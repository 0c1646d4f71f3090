"""
Tests for merkle proof extraction and verification.

The concrete scenario uses a depth-3 tree over sha256("0") .. sha256("7");
every expected hash below was computed once, outside this code base.
"""

import random
import unittest
from hashlib import sha256

from state_proofs.ssz.merkle import (
    MerkleProof,
    ProofMismatch,
    TraversalError,
    build_tree,
    compute_root_from_proof,
    extract_proof,
    leaf_gindex,
    verify_merkle_proof,
)

H = [bytes.fromhex(h) for h in (
    "5feceb66ffc86f38d952786c6d696c79c2dbc239dd4e91b46729d73a27fb57e9",
    "6b86b273ff34fce19d6b804eff5a3f5747ada4eaa22f1d49c01e52ddb7875b4b",
    "d4735e3a265e16eee03f59718b9b5d03019c07d8b6c51f90da3a666eec13ab35",
    "4e07408562bedb8b60ce05c1decfe3ad16b72230967de01f640b7e4729b49fce",
    "4b227777d4dd1fc61c6f884f48641d02b4d121d3fd328cb08b5531fcacdabf8a",
    "ef2d127de37b942baad06145e54b0c619a1f22327b2ebbcfbec78f5564afe39d",
    "e7f6c011776e8db7cd330b54174fd76f7d0216b612387a5ffcfb81e6f0919683",
    "7902699be42c8a8e46fbbb4501726517e86b22c56a189f7625a6da49081b2451",
)]

N01 = bytes.fromhex("b9b10a1bc77d2a241d120324db7f3b81b2edb67eb8e9cf02af9c95d30329aef5")
N23 = bytes.fromhex("a9f5b3ab61e28357cfcd14e2b42397f896aeea8d6998d19e6da85584e150d2b4")
N45 = bytes.fromhex("aabd9871539c37bda9f77bf47440df5a57c2a5736a04387d1c3b92dffefa47e4")
N67 = bytes.fromhex("134843af7fc8f29950b1e1dfb7c49752e0f7b711b458ee9ae3c5ca220166d688")
N0123 = bytes.fromhex("c478fead0c89b79540638f844c8819d9a4281763af9272c7f3968776b6052345")
N4567 = bytes.fromhex("0302c96f45abbeadb23878331a9ba406078bd0bd5dc202c102af7b9986249f01")
ROOT = bytes.fromhex("3b828c4f4b48c5d4cb5562a474ec9e2fd8d5546fae40e90732ef635892e42720")

ZERO_HASH_1 = bytes.fromhex("f5a5fd42d16a20302798ef6ed309979b43003d2320d9f0e8ea9831a92759fb4b")


def flip_bit(value: bytes, bit: int) -> bytes:
    data = bytearray(value)
    data[bit // 8] ^= 1 << (bit % 8)
    return bytes(data)


def random_chunks(rng: random.Random, count: int):
    return [bytes(rng.getrandbits(8) for _ in range(32)) for _ in range(count)]


class TestConcreteScenario(unittest.TestCase):
    """Depth-3 tree over the hashes of the ASCII digits "0".."7"."""

    def setUp(self):
        self.tree = build_tree(H)

    def test_leaves_are_digit_hashes(self):
        for i, leaf in enumerate(H):
            self.assertEqual(sha256(str(i).encode()).digest(), leaf)

    def test_tree_root(self):
        self.assertEqual(bytes(self.tree.merkle_root()), ROOT)
        self.assertEqual(sha256(N01 + N23).digest(), N0123)
        self.assertEqual(sha256(N45 + N67).digest(), N4567)
        self.assertEqual(sha256(N0123 + N4567).digest(), ROOT)

    def test_prove_leaf_five(self):
        proof = extract_proof(self.tree, 0b1101, H[5])

        self.assertEqual(proof.root, ROOT)
        self.assertEqual(proof.leaf, H[5])
        self.assertEqual(proof.index, 13)
        self.assertEqual(proof.siblings, [N0123, N67, H[4]])
        self.assertEqual(proof.branch(), [H[4], N67, N0123])
        self.assertTrue(proof.verify())

    def test_prove_inner_node(self):
        # generalized index 5 is the parent of leaves 2 and 3
        proof = extract_proof(self.tree, 5, N23)
        self.assertEqual(proof.siblings, [N4567, N01])
        self.assertTrue(verify_merkle_proof(ROOT, N23, 5, proof.siblings))

    def test_prove_root(self):
        proof = extract_proof(self.tree, 1, ROOT)
        self.assertEqual(proof.siblings, [])
        self.assertTrue(proof.verify())

    def test_reconstruct_root(self):
        self.assertEqual(compute_root_from_proof(H[5], 13, [N0123, N67, H[4]]), ROOT)
        self.assertEqual(compute_root_from_proof(H[0], 8, [N4567, N23, H[1]]), ROOT)

    def test_sibling_order_matters(self):
        self.assertFalse(verify_merkle_proof(ROOT, H[5], 13, [H[4], N67, N0123]))

    def test_zero_padded_tree(self):
        tree = build_tree(H[:5], depth=3)
        proof = extract_proof(tree, leaf_gindex(4, 3), H[4])
        self.assertEqual(proof.siblings, [N0123, ZERO_HASH_1, b"\x00" * 32])
        self.assertTrue(proof.verify())


class TestProofProperties(unittest.TestCase):

    def setUp(self):
        self.rng = random.Random(4788)

    def test_round_trip_every_leaf(self):
        for depth in range(0, 9):
            leaves = random_chunks(self.rng, 1 << depth)
            tree = build_tree(leaves, depth)
            root = bytes(tree.merkle_root())
            for position, leaf in enumerate(leaves):
                index = leaf_gindex(position, depth)
                proof = extract_proof(tree, index, leaf)
                self.assertEqual(proof.root, root)
                self.assertTrue(
                    verify_merkle_proof(root, leaf, index, proof.siblings),
                    f"depth {depth} leaf {position}",
                )

    def test_sibling_count_equals_index_depth(self):
        for depth in range(0, 9):
            tree = build_tree(random_chunks(self.rng, 1 << depth), depth)
            for index in range(1, 1 << (depth + 1)):
                with self.subTest(depth=depth, index=index):
                    node_root = _node_at(tree, index)
                    proof = extract_proof(tree, index, node_root)
                    self.assertEqual(len(proof.siblings), index.bit_length() - 1)

    def test_tamper_every_bit_depth_three(self):
        leaves = random_chunks(self.rng, 8)
        tree = build_tree(leaves)
        root = bytes(tree.merkle_root())
        for position, leaf in enumerate(leaves):
            index = leaf_gindex(position, 3)
            siblings = extract_proof(tree, index, leaf).siblings
            for bit in range(256):
                self.assertFalse(verify_merkle_proof(flip_bit(root, bit), leaf, index, siblings))
                self.assertFalse(verify_merkle_proof(root, flip_bit(leaf, bit), index, siblings))
                for level in range(len(siblings)):
                    tampered = list(siblings)
                    tampered[level] = flip_bit(tampered[level], bit)
                    self.assertFalse(verify_merkle_proof(root, leaf, index, tampered))

    def test_tamper_up_to_depth_eight(self):
        bits = (0, 7, 8, 100, 255)
        for depth in range(1, 9):
            leaves = random_chunks(self.rng, 1 << depth)
            tree = build_tree(leaves, depth)
            root = bytes(tree.merkle_root())
            for position, leaf in enumerate(leaves):
                index = leaf_gindex(position, depth)
                siblings = extract_proof(tree, index, leaf).siblings
                for bit in bits:
                    self.assertFalse(verify_merkle_proof(flip_bit(root, bit), leaf, index, siblings))
                    self.assertFalse(verify_merkle_proof(root, flip_bit(leaf, bit), index, siblings))
                    for level in range(depth):
                        tampered = list(siblings)
                        tampered[level] = flip_bit(tampered[level], bit)
                        self.assertFalse(verify_merkle_proof(root, leaf, index, tampered))


def _node_at(node, index):
    for right in bin(index)[3:]:
        node = node.get_right() if right == "1" else node.get_left()
    return bytes(node.merkle_root())


class TestProofErrors(unittest.TestCase):

    def setUp(self):
        self.tree = build_tree(H)

    def test_index_deeper_than_tree(self):
        with self.assertRaises(TraversalError):
            extract_proof(self.tree, 16, H[0])
        with self.assertRaises(TraversalError):
            extract_proof(self.tree, 6434, H[0])

    def test_leaf_mismatch(self):
        with self.assertRaises(ProofMismatch):
            extract_proof(self.tree, 13, H[4])

    def test_compute_root_wrong_sibling_count(self):
        with self.assertRaises(ValueError):
            compute_root_from_proof(H[5], 13, [N0123, N67])


class TestVerifierNeverRaises(unittest.TestCase):

    def test_malformed_inputs_are_invalid(self):
        siblings = [N0123, N67, H[4]]
        cases = [
            (ROOT, H[5], 0, siblings),
            (ROOT, H[5], -13, siblings),
            (ROOT, H[5], 13, siblings[:2]),
            (ROOT, H[5], 13, siblings + [H[0]]),
            (ROOT[:31], H[5], 13, siblings),
            (ROOT, H[5] + b"\x00", 13, siblings),
            (ROOT, H[5], 13, [N0123, N67, H[4][:16]]),
            (ROOT, H[5], 13, [N0123, N67, H[4].hex()]),
        ]
        for root, leaf, index, proof in cases:
            with self.subTest(index=index, count=len(proof)):
                self.assertFalse(verify_merkle_proof(root, leaf, index, proof))

    def test_proof_record(self):
        proof = MerkleProof(root=ROOT, leaf=H[5], index=13, siblings=[N0123, N67, H[4]])
        self.assertTrue(proof.verify())
        forged = MerkleProof(root=ROOT, leaf=H[4], index=13, siblings=[N0123, N67, H[5]])
        self.assertFalse(forged.verify())


if __name__ == "__main__":
    unittest.main()
