# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from clutchlib.envelope import SignedEnvelope, verify_envelope
from clutchlib.function_calls import Coordinates, FunctionCall, FunctionCallTag, RideRequest
from clutchlib.normalize import parse_unsigned_transaction
from clutchlib.signer import Signature, Signer
from clutchlib.transaction import SignedTransaction, UnsignedTransaction, sign_transaction, sign_transaction_dict

__all__ = [
    'Coordinates',
    'FunctionCall',
    'FunctionCallTag',
    'RideRequest',
    'Signature',
    'SignedEnvelope',
    'SignedTransaction',
    'Signer',
    'UnsignedTransaction',
    'parse_unsigned_transaction',
    'sign_transaction',
    'sign_transaction_dict',
    'verify_envelope',
]
