# jazzcore

`jazzcore` provides the core data structures for collaborative values
("CoValues"). A CoValue is identified by the hash of its header. Its history
is kept as one transaction log per session. Each log is chained with a
streaming BLAKE3 hash and signed with Ed25519.

## Installation

```
pip install jazzcore
```

To run the test suite:

```
pip install "jazzcore[test]"
pytest
```

## Modules

- `jazzcore.blake3`: a pure-Python BLAKE3 that gives 32-byte digests
  (`blake3`, `Blake3Hasher`).
- `jazzcore.base58`: `b58encode` and `b58decode` using the Bitcoin alphabet.
- `jazzcore.hashing`: `canonical_json`, plus `Hash` (`hash_z…`, 32 bytes),
  `ShortHash` (`shortHash_z…`, 19 bytes) and `StreamingHash`.
- `jazzcore.sign`: `Signature` (`signature_z…`), `SignerSecret`
  (`signerSecret_z…`) and `SignerID` (`signer_z…`). When verification fails,
  `SignatureError` is raised.
- `jazzcore.ids`: `RawCoID` (`co_z…`), `CoID`, `SessionID`
  (`co_z…_session_z…`) and `TransactionID`.
- `jazzcore.permission`: `Account`, `AccountRole` and `Role`.
- `jazzcore.covalue`: `CoValueHeader` and its rulesets (`UnsafeAllowAll`,
  `GroupRuleset`, `OwnedByGroup`), along with `CoValuePriority`,
  `priority_of`, `CoValueType`, `SyncRole` and `MAX_RECOMMENDED_TX_SIZE`.
- `jazzcore.transaction`: `Transaction`, which holds either
  `PrivateTransaction` or `TrustingTransaction` content.
- `jazzcore.sync`: `CoValueKnownState`, `SessionNewContent` and the sync
  messages `LoadMessage`, `KnownStateMessage`, `NewContentMessage` and
  `DoneMessage`.
- `jazzcore.session`: `SessionLog`, `ExpectedNewHashAfter` and
  `VerifiedState`.
  - `VerifiedState.try_add_transactions` checks the hash and the signature
    before it appends transactions. A hash mismatch raises
    `InvalidHashError`; a bad signature raises `SignatureError`.
  - `VerifiedState.new_content_since` splits what a peer lacks into
    `NewContentMessage` pieces of limited size.
- `jazzcore.covaluecore`: `CoValueCore`, which caches its known state.

## Example

```python
from jazzcore.hashing import Hash, StreamingHash
from jazzcore.sign import SignerSecret

h = Hash.from_value({"hello": "world"})
assert Hash.parse(str(h)) == h

signer = SignerSecret.generate()
signature = signer.sign(str(h))
signer.signer_id().verify(str(h), signature)   # raises SignatureError on mismatch

stream = StreamingHash()
stream.update({"madeAt": 1})
print(stream.digest())
```

Values are hashed and signed in their JSON form as produced by
`canonical_json`: two-space indent, keys sorted.

## What it does not do

`jazzcore` contains only data structures and verification. It has no:

- network transport, peer handling or server for sync messages (the messages
  can be built and serialised with `to_json`, but nothing sends them);
- storage;
- command-line tool;
- evaluation of group membership or of role-based permissions beyond the
  `Role` and `AccountRole` types;
- encryption or decryption of private transactions.