"""
Tool Install — Shell profile named-block tests.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

from oneclick.core.models.install import ProfileEditBlock
from oneclick.core.services.tool_install.data.profile_maps import (
    LEGACY_GO_WINDOWS,
    LEGACY_NODE_WINDOWS,
)
from oneclick.core.services.tool_install.domain.profile_block import (
    merge_block,
    render_block,
)
from oneclick.core.services.tool_install.execution.profile_writer import (
    ProfileEnvironmentWriter,
)

GO_BLOCK = ProfileEditBlock(
    marker="oneclick go",
    lines=[
        'export GOROOT="/usr/local/go"',
        'export GOPATH="$HOME/go"',
        'export PATH="$GOROOT/bin:$GOPATH/bin:$PATH"',
    ],
    legacy_windows=LEGACY_GO_WINDOWS,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


# ── Pure merge ────────────────────────────────────────────────

class TestMergeBlock:
    def test_empty_file(self):
        merged = merge_block("", GO_BLOCK)
        assert merged == "\n".join(render_block(GO_BLOCK)) + "\n"

    def test_appends_after_user_content(self):
        merged = merge_block("alias ll='ls -l'\n\n\n", GO_BLOCK)
        assert merged.startswith("alias ll='ls -l'\n\n# >>> oneclick go >>>\n")
        assert merged.endswith("# <<< oneclick go <<<\n")

    def test_idempotent(self):
        once = merge_block("alias ll='ls -l'\n", GO_BLOCK)
        assert merge_block(once, GO_BLOCK) == once

    def test_replaces_block_of_different_length(self):
        old = ProfileEditBlock(marker="oneclick go", lines=["export A=1", "export B=2", "export C=3"])
        new = ProfileEditBlock(marker="oneclick go", lines=["export D=4"])
        merged = merge_block(merge_block("# top\n", old) + "alias after=1\n", new)
        assert "export A=1" not in merged
        assert "export D=4" in merged
        assert "alias after=1" in merged
        assert merged.count("# >>> oneclick go >>>") == 1

    def test_other_markers_untouched(self):
        node = ProfileEditBlock(marker="oneclick node", lines=["export NVM_DIR=x"])
        text = merge_block(merge_block("", node), GO_BLOCK)
        assert node.start_marker in text
        assert GO_BLOCK.start_marker in text

    def test_orphan_start_marker_keeps_user_lines(self):
        text = "# >>> oneclick go >>>\nalias keep=1\n"
        merged = merge_block(text, GO_BLOCK)
        assert "alias keep=1" in merged
        assert merged.count("# >>> oneclick go >>>") == 1

    def test_legacy_go_window_removed(self):
        legacy = (
            "alias ll='ls -l'\n"
            "# Go environment setup\n"
            "export GOROOT=/usr/local/go\n"
            "export GOPATH=$HOME/go\n"
            "export PATH=$GOROOT/bin:$GOPATH/bin:$PATH\n"
            "export EDITOR=vim\n"
        )
        merged = merge_block(legacy, GO_BLOCK)
        assert "# Go environment setup" not in merged
        assert "export GOROOT=/usr/local/go\n" not in merged
        assert "export EDITOR=vim" in merged
        assert "alias ll='ls -l'" in merged

    def test_legacy_node_windows_removed(self):
        block = ProfileEditBlock(
            marker="oneclick node",
            lines=['export NVM_DIR="$HOME/.nvm"'],
            legacy_windows=LEGACY_NODE_WINDOWS,
        )
        legacy = (
            "# NVM environment setup\n"
            'export NVM_DIR="$HOME/.nvm"\n'
            '[ -s "$NVM_DIR/nvm.sh" ] && \\. "$NVM_DIR/nvm.sh"\n'
            '[ -s "$NVM_DIR/bash_completion" ] && \\. "$NVM_DIR/bash_completion"\n'
            "\n"
            "# npm global packages\n"
            'export PATH="$HOME/.npm-global/bin:$PATH"\n'
            "\n"
            "# NVM China mirrors\n"
            "export NVM_NODEJS_ORG_MIRROR=https://npmmirror.com/mirrors/node/\n"
            "export NVM_IOJS_ORG_MIRROR=https://npmmirror.com/mirrors/iojs/\n"
            "export KEEP_ME=1\n"
        )
        merged = merge_block(legacy, block)
        assert "npmmirror" not in merged
        assert "# NVM environment setup" not in merged
        assert "export KEEP_ME=1" in merged


# ── Writer ────────────────────────────────────────────────────

class TestProfileEnvironmentWriter:
    def test_apply_twice_leaves_one_copy(self, tmp_path: Path):
        bashrc = _write(tmp_path / ".bashrc", "alias ll='ls -l'\n")
        writer = ProfileEnvironmentWriter()
        writer.apply([bashrc], GO_BLOCK)
        first = bashrc.read_text()
        writer.apply([bashrc], GO_BLOCK)
        assert bashrc.read_text() == first
        assert first.count("# >>> oneclick go >>>") == 1
        assert first.count('export GOROOT="/usr/local/go"') == 1

    def test_missing_files_skipped(self, tmp_path: Path):
        bashrc = _write(tmp_path / ".bashrc", "")
        missing = tmp_path / ".zshrc"
        count = ProfileEnvironmentWriter().apply([missing, bashrc], GO_BLOCK)
        assert count == 1
        assert not missing.exists()

    def test_updated_paths_recorded(self, tmp_path: Path):
        bashrc = _write(tmp_path / ".bashrc", "")
        profile = _write(tmp_path / ".profile", "")
        writer = ProfileEnvironmentWriter()
        assert writer.apply([bashrc, profile], GO_BLOCK) == 2
        assert writer.updated == [str(bashrc), str(profile)]

    def test_tilde_expanded(self, fake_home: Path):
        bashrc = _write(fake_home / ".bashrc", "")
        assert ProfileEnvironmentWriter().apply(["~/.bashrc"], GO_BLOCK) == 1
        assert GO_BLOCK.start_marker in bashrc.read_text()

    def test_file_mode_preserved(self, tmp_path: Path):
        bashrc = _write(tmp_path / ".bashrc", "")
        os.chmod(bashrc, 0o600)
        ProfileEnvironmentWriter().apply([bashrc], GO_BLOCK)
        assert stat.S_IMODE(bashrc.stat().st_mode) == 0o600

    def test_no_temp_files_left(self, tmp_path: Path):
        bashrc = _write(tmp_path / ".bashrc", "")
        ProfileEnvironmentWriter().apply([bashrc], GO_BLOCK)
        assert sorted(p.name for p in tmp_path.iterdir()) == [".bashrc"]

    def test_backup_written_when_enabled(self, tmp_path: Path):
        bashrc = _write(tmp_path / ".bashrc", "alias ll='ls -l'\n")
        ProfileEnvironmentWriter(backup=True).apply([bashrc], GO_BLOCK)
        backups = [p for p in tmp_path.iterdir() if ".backup." in p.name]
        assert len(backups) == 1
        assert backups[0].read_text() == "alias ll='ls -l'\n"

    def test_non_utf8_bytes_round_trip(self, tmp_path: Path):
        bashrc = tmp_path / ".bashrc"
        bashrc.write_bytes(b"# caf\xe9\nalias ll='ls -l'\n")
        assert ProfileEnvironmentWriter().apply([bashrc], GO_BLOCK) == 1
        data = bashrc.read_bytes()
        assert data.startswith(b"# caf\xe9\nalias ll='ls -l'\n")
        assert b"# >>> oneclick go >>>" in data

    def test_symlinked_profile_edits_target(self, tmp_path: Path):
        dotfiles = tmp_path / "dotfiles"
        dotfiles.mkdir()
        real = _write(dotfiles / "bashrc", "alias ll='ls -l'\n")
        link = tmp_path / ".bashrc"
        link.symlink_to(real)
        assert ProfileEnvironmentWriter().apply([link], GO_BLOCK) == 1
        assert link.is_symlink()
        assert GO_BLOCK.start_marker in real.read_text()
        assert sorted(p.name for p in dotfiles.iterdir()) == ["bashrc"]
