# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
import click

GUIDE = """\
SSHFS installation guide

Prerequisites
  sshfs needs FUSE (Filesystem in Userspace) support and the sshfs client.

macOS (Homebrew)
  brew install --cask macfuse
  brew install gromgit/fuse/sshfs-mac

  Then open System Settings > Privacy & Security and allow the macFUSE
  system extension. A restart may be required.

Debian / Ubuntu
  sudo apt install sshfs

Fedora
  sudo dnf install fuse-sshfs
"""


@click.command()
def main() -> None:
    """Show how to install sshfs and FUSE."""
    click.echo(GUIDE, nl=False)
