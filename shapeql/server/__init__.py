# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""HTTP server for compiled schemas.

Usage:
    from shapeql.bootstrap import compile_from_config
    from shapeql.server import create_app, run_server

    assembled = compile_from_config(config)
    run_server(create_app(assembled, config), host="0.0.0.0", port=4000)
"""

from shapeql.server.app import create_app, execute_query, format_error, run_server

__all__ = ["create_app", "execute_query", "format_error", "run_server"]
