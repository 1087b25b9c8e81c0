# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pane Viewer - track ephemeral monitor panes in terminal multiplexers."""

__version__ = "0.3.0"
