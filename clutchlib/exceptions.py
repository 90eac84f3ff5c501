"""
Copyright 2025 Hathor Labs

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

   http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

from typing import Optional, Sequence


class ClutchError(Exception):
    """General error class"""


class TxEncodingError(ClutchError):
    """Base class for errors found while turning an unsigned transaction into bytes"""


class UnsupportedCallType(TxEncodingError):
    """The function call tag is missing or is not one we know how to encode"""


class MalformedArguments(TxEncodingError):
    """Required fields are missing or have the wrong kind.

    For example, a ride request without fare, or coordinates that aren't finite numbers.
    """


class SigningError(ClutchError):
    """Base class for signature errors"""


class InvalidKeyOrDigest(SigningError):
    """Private key is outside the curve's scalar range or the digest doesn't have 32 bytes"""


class InvalidSignature(SigningError):
    """Signature does not match the transaction it is attached to"""


class MalformedEnvelope(ClutchError):
    """A signed transaction could not be decoded into its seven fields"""


class ClutchClientError(ClutchError):
    """Base class for errors when communicating with the ClutchHub API"""


class GraphQLError(ClutchClientError):
    """The GraphQL endpoint answered with a list of errors"""

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = list(messages)
        super().__init__('\n'.join(self.messages))


class SubmitTxFailed(ClutchClientError):
    """An attempt to submit a signed transaction to the API failed"""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        self.status = status
        super().__init__(message)
