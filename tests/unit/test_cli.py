"""
CLI Unit Tests
Tests for commitree_cli (build, prove, verify, render, config)

Commands are driven through main(argv) and their output is read with
capsys. Every test runs in a scratch directory with no config files.
"""
import io
import json

import pytest

from commitree.crypto.hash_functions import Keccak256, Sha256
from commitree.merkle.merkle_tree import MerkleTree
from commitree_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    main,
)


@pytest.fixture(autouse=True)
def _isolated(isolated_cli):
    return isolated_cli


def _prove(tmp_path, target="b", leaves=("a", "b", "c"), extra=()):
    out = tmp_path / "proof.json"
    code = main(["prove", target, "--leaves", *leaves, "--out", str(out), *extra])
    assert code == EXIT_SUCCESS
    return out


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR
        assert "usage" in capsys.readouterr().out.lower()


class TestBuild:
    """Tests for `commitree build`."""

    def test_json_root(self, capsys, letters_tree):
        assert main(["build", "a", "b", "c", "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["root"] == "0x" + letters_tree.root().hex()
        assert data["hash_function"] == "keccak256"
        assert data["leaf_count"] == 3
        assert data["layer_sizes"] == [3, 2, 1]
        assert data["leaves"] == ["0x" + leaf.hex() for leaf in letters_tree.leaves]
        assert "tree" not in data

    def test_human_output(self, capsys, letters_tree):
        assert main(["build", "c", "a", "b"]) == EXIT_SUCCESS

        out = capsys.readouterr().out
        assert f"root: 0x{letters_tree.root().hex()}" in out
        assert "layers: 3 -> 2 -> 1" in out

    def test_with_tree(self, capsys):
        assert main(["build", "a", "b", "--tree"]) == EXIT_SUCCESS

        assert "└─ 0x" in capsys.readouterr().out

    def test_empty_set(self, capsys):
        assert main(["build", "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["root"] == "0x" + "00" * 32
        assert data["layer_sizes"] == []

    def test_sha256(self, capsys):
        assert main(["build", "a", "b", "c", "--hash", "sha256", "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["hash_function"] == "sha256"
        assert data["root"] == "0x" + MerkleTree.build([b"a", b"b", b"c"], Sha256()).root().hex()

    def test_leaves_from_file(self, capsys, isolated_cli, letters_tree):
        path = isolated_cli / "leaves.txt"
        path.write_text("a\n\nb\nc\n")

        assert main(["build", "--file", str(path), "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["root"] == "0x" + letters_tree.root().hex()

    def test_empty_leaf_needs_argument(self, capsys, isolated_cli, keccak):
        path = isolated_cli / "leaves.txt"
        path.write_text("a\n\n\nb\n")

        assert main(["build", "", "--file", str(path), "--json"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["leaf_count"] == 3
        assert data["root"] == "0x" + MerkleTree.build([b"", b"a", b"b"], keccak).root().hex()

    def test_file_help_mentions_blank_lines(self, capsys):
        with pytest.raises(SystemExit):
            main(["build", "--help"])

        help_text = " ".join(capsys.readouterr().out.split())
        assert "Blank lines are skipped" in help_text

    def test_hex_leaves(self, capsys, keccak):
        assert main(["build", "--hex", "0x01", "0x02", "--json"]) == EXIT_SUCCESS

        expected = MerkleTree.build([b"\x01", b"\x02"], keccak).root()
        assert json.loads(capsys.readouterr().out)["root"] == "0x" + expected.hex()

    def test_bad_hex_is_runtime_error(self, capsys):
        assert main(["build", "--hex", "zz"]) == EXIT_RUNTIME_ERROR
        assert "Error" in capsys.readouterr().err

    def test_config_file_output_format(self, capsys, isolated_cli):
        (isolated_cli / "commitree.json").write_text(
            json.dumps({"default_output_format": "json", "hash_function": "sha256"})
        )

        assert main(["build", "a"]) == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["hash_function"] == "sha256"


class TestProveAndVerify:
    """Tests for `commitree prove` and `commitree verify`."""

    def test_prove_to_stdout(self, capsys, letters_tree, keccak):
        assert main(["prove", "b", "--leaves", "a", "b", "c"]) == EXIT_SUCCESS

        doc = json.loads(capsys.readouterr().out)
        assert doc["leaf"] == "0x" + keccak.hash(b"b").hex()
        assert doc["root"] == "0x" + letters_tree.root().hex()
        assert doc["hash_function"] == "keccak256"

    def test_prove_then_verify(self, capsys, isolated_cli):
        out = _prove(isolated_cli)
        assert "proof written" in capsys.readouterr().out

        assert main(["verify", str(out)]) == EXIT_SUCCESS
        assert "valid: true" in capsys.readouterr().out

    def test_verify_json_report(self, capsys, isolated_cli):
        out = _prove(isolated_cli, extra=("--json",))
        capsys.readouterr()

        assert main(["verify", str(out), "--json"]) == EXIT_SUCCESS

        report = json.loads(capsys.readouterr().out)
        assert report["valid"] is True
        assert "errors" not in report

    def test_every_leaf_verifies(self, capsys, isolated_cli):
        for target in ("a", "b", "c", "d", "e"):
            out = _prove(isolated_cli, target=target, leaves=("a", "b", "c", "d", "e"))
            assert main(["verify", str(out)]) == EXIT_SUCCESS

    def test_verify_sha256_proof(self, isolated_cli):
        out = _prove(isolated_cli, extra=("--hash", "sha256"))

        assert json.loads(out.read_text())["hash_function"] == "sha256"
        assert main(["verify", str(out)]) == EXIT_SUCCESS

    def test_absent_leaf(self, capsys):
        assert main(["prove", "z", "--leaves", "a", "b", "c"]) == EXIT_RUNTIME_ERROR
        assert "not part of the tree" in capsys.readouterr().err

    def test_wrong_trusted_root(self, capsys, isolated_cli):
        out = _prove(isolated_cli)

        code = main(["verify", str(out), "--root", "0x" + "00" * 32])

        assert code == EXIT_VERIFICATION_FAILED
        assert "trusted root" in capsys.readouterr().out

    def test_matching_trusted_root(self, isolated_cli, letters_tree):
        out = _prove(isolated_cli)

        assert main(["verify", str(out), "--root", "0x" + letters_tree.root().hex()]) == EXIT_SUCCESS

    def test_leaf_data_matches(self, isolated_cli):
        out = _prove(isolated_cli)

        assert main(["verify", str(out), "--leaf", "b"]) == EXIT_SUCCESS

    def test_leaf_data_mismatch(self, capsys, isolated_cli):
        out = _prove(isolated_cli)

        assert main(["verify", str(out), "--leaf", "a"]) == EXIT_VERIFICATION_FAILED
        assert "does not match the proven leaf" in capsys.readouterr().out

    def test_tampered_sibling(self, capsys, isolated_cli):
        out = _prove(isolated_cli)
        doc = json.loads(out.read_text())
        doc["siblings"][0] = "0x" + Keccak256().hash(b"tampered").hex()
        out.write_text(json.dumps(doc))

        assert main(["verify", str(out)]) == EXIT_VERIFICATION_FAILED
        assert "Recomputed root does not match" in capsys.readouterr().out

    def test_verify_from_stdin(self, monkeypatch, isolated_cli):
        out = _prove(isolated_cli)
        monkeypatch.setattr("sys.stdin", io.StringIO(out.read_text()))

        assert main(["verify", "-"]) == EXIT_SUCCESS

    def test_missing_proof_file(self, capsys):
        assert main(["verify", "missing.json"]) == EXIT_RUNTIME_ERROR
        assert "Proof not found" in capsys.readouterr().err

    def test_malformed_proof_file(self, capsys, isolated_cli):
        path = isolated_cli / "bad.json"
        path.write_text(json.dumps({"leaf": "nothex"}))

        assert main(["verify", str(path)]) == EXIT_RUNTIME_ERROR
        assert "Invalid proof document" in capsys.readouterr().err

    def test_malformed_proof_json_report(self, capsys, isolated_cli):
        out = _prove(isolated_cli)
        doc = json.loads(out.read_text())
        doc["siblings"] = ["0xzz"]
        out.write_text(json.dumps(doc))
        capsys.readouterr()

        assert main(["verify", str(out), "--json"]) == EXIT_RUNTIME_ERROR

        error = json.loads(capsys.readouterr().out)
        assert error["code"] == "SCHEMA_VALIDATION_ERROR"
        assert error["details"]["field_path"] == "siblings"

    def test_empty_hashes_are_rejected(self, capsys, isolated_cli):
        path = isolated_cli / "empty.json"
        path.write_text(json.dumps({
            "hash_function": "keccak256", "leaf": "0x", "index": 0, "siblings": [], "root": "0x",
        }))

        assert main(["verify", str(path)]) == EXIT_RUNTIME_ERROR

        captured = capsys.readouterr()
        assert "valid: true" not in captured.out
        assert "Malformed proof" in captured.err

    def test_short_sibling_json_report(self, capsys, isolated_cli):
        out = _prove(isolated_cli)
        doc = json.loads(out.read_text())
        doc["siblings"][0] = doc["siblings"][0][:-2]
        out.write_text(json.dumps(doc))
        capsys.readouterr()

        assert main(["verify", str(out), "--json"]) == EXIT_RUNTIME_ERROR

        error = json.loads(capsys.readouterr().out)
        assert error["code"] == "MERKLE_PROOF_INVALID"
        assert error["details"]["field"] == "siblings[0]"
        assert error["details"]["actual_size"] == 31

    def test_short_trusted_root(self, capsys, isolated_cli):
        out = _prove(isolated_cli)
        capsys.readouterr()

        assert main(["verify", str(out), "--root", "0x00"]) == EXIT_RUNTIME_ERROR
        assert "must be 32 bytes" in capsys.readouterr().err

    def test_unknown_hash_in_document(self, capsys, isolated_cli):
        out = _prove(isolated_cli)
        doc = json.loads(out.read_text())
        doc["hash_function"] = "md5"
        out.write_text(json.dumps(doc))

        assert main(["verify", str(out)]) == EXIT_RUNTIME_ERROR
        assert "Unknown hash function" in capsys.readouterr().err


class TestRender:
    def test_render(self, capsys, letters_tree):
        assert main(["render", "a", "b", "c"]) == EXIT_SUCCESS

        assert capsys.readouterr().out == str(letters_tree)


class TestConfigCommand:
    def test_init_then_show(self, capsys, isolated_cli):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (isolated_cli / "commitree.json").exists()
        capsys.readouterr()

        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["hash_function"] == "keccak256"

    def test_init_refuses_overwrite(self, capsys, isolated_cli):
        (isolated_cli / "commitree.json").write_text("{}")

        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR
        assert "already exists" in capsys.readouterr().err

    def test_broken_config_file(self, capsys, isolated_cli):
        (isolated_cli / "commitree.json").write_text("{broken")

        assert main(["build", "a"]) == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err

    def test_non_string_log_level(self, capsys, isolated_cli):
        (isolated_cli / "commitree.json").write_text(json.dumps({"log_level": 10}))

        assert main(["build", "a"]) == EXIT_RUNTIME_ERROR

        err = capsys.readouterr().err
        assert "Error loading configuration" in err
        assert "'log_level' must be a string" in err


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
