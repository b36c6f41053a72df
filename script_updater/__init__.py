# SPDX-License-Identifier: GPL-3.0-only
# SPDX-FileCopyrightText: Copyright (c) 2025 Andrew Wyatt (Fewtarius)

"""
Script Updater - Self-Update Mechanism for Long-Lived Scripts

Checks a remote manifest for newer versions with interval-based caching,
downloads and unpacks update archives, and swaps the script directory for
the new files while keeping a backup.
"""

__version__ = "20261018.1"
__author__ = "The Script Updater Authors"
