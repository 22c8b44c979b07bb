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

"""
The object graph encoder.

Submodules, from the leaves up:

- `types`: symbols, mappings with a default value, extension chains and the custom hook protocols
- `object_model`: how the encoder inspects objects
- `reference_tables`: deduplication of symbols and repeated objects
- `compound`: encoders for values that hold other values
- `dispatcher`: value classification and the recursive writer
- `encoder`: version header and public entry points
"""
