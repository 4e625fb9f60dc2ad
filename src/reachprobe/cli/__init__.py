# SPDX-FileCopyrightText: 2025 reachprobe contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
