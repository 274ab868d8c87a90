# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""shapeql - GraphQL gateway compiled from service API descriptions.

Reads botocore/aws-sdk style service descriptions (shapes + operations) and
compiles them at startup into a GraphQL schema whose resolvers call the
corresponding AWS client methods.

Submodules:
- core: Models, configuration and errors
- catalog: Loading descriptions, version selection, shape lookup
- compiler: Type extraction, deduplication, endpoint binding, schema assembly
- backends: boto3 client factory
- server: FastAPI app serving the compiled schema
- relay: GitHub webhook relay (strawberry)
"""

__version__ = "0.1.0"
