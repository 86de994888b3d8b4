# SPDX-License-Identifier: MIT
"""Application services.

Services implement the publish and release logic, coordinating between the
domain layer (core/) and the adapters (the Play API client, ``gh``).
"""
