# tcrtrie

tcrtrie finds T-cell receptor junction sequences that are close to a query. It reads
a reference set from an AIRR rearrangement file and builds a trie over the sequences.
The file is tab-separated and has a header row. It must have a `junction_aa` column
and can also have `v_call` and `j_call` columns. You can search the trie in two ways:

- **Edit-count search** sets separate limits on substitutions, insertions and
  deletions.
- **Matrix search** uses a substitution matrix and a cost radius. The matrix can hold
  similarity scores, as in a BLOSUM-style table, or costs.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

## Command line

Search with a single query and allow one substitution:

```
tcrtrie -t reference.tsv -q CASSLGQETQYF -s 1 -i 0 -d 0 -o out
```

Search with every query in a file:

```
tcrtrie -t reference.tsv --input-queries queries.tsv -s 1 -i 1 -d 1 -o out
```

The queries file is tab-separated. Its first line is a header and is skipped. The
first column of each later row is taken as a query, and rows where that column is
empty are skipped.

Search using a substitution matrix and a cost radius:

```
tcrtrie -t reference.tsv -q CASSLGQETQYF -m blosum62.txt -r 4 --deletion-score -6 -o out
```

| Option | Meaning |
| --- | --- |
| `-t, --trie` | AIRR file with reference sequences (required) |
| `-o, --output` | output folder (default: current directory, created if missing) |
| `-q, --query` | a single query sequence |
| `--input-queries` | tab-separated file of queries (first column, after a header) |
| `--v-gene`, `--j-gene` | accepted only together with `--query` |
| `-s, --sub`, `-i, --ins`, `-d, --del` | allowed substitutions, insertions, deletions |
| `-m, --matrix-search` | substitution matrix file |
| `-r, --score-radius` | cost radius for the matrix search (required with `-m`) |
| `--deletion-score` | gap score for the matrix search (default -6; only with `-m`) |

Rules for combining options:

- Give exactly one of `--query` or `--input-queries`.
- The edit limits cannot be combined with `--matrix-search`.

If the options are invalid, the command exits with status 2. If the search fails,
for example because an input file cannot be read, it prints `Error during search: ...`
and exits with status 1. On success it prints the path of the results file and the
elapsed time in milliseconds.

### Results file

The results are written to `results.tsv` in the output folder. Its columns are `query`,
`match` and `dist`. The distance is written in compact (`%g`) form. Two more columns,
`v_gene` and `j_gene`, are added when matches carry them:

- With a single query, the header gets `v_gene` or `j_gene` when any match has that
  gene.
- With a queries file, the queries run in batches of 1000. The header is decided
  from the first batch. Each row holds only the genes its match has.

A single query longer than the trie's maximum query length gives a results file with
only the header. In a batch, each such query gets no matches. Both cases log a warning.

### Matrix files

The first line of a matrix file lists the letters. Each following row starts with its
letter and holds one number for each column. The file is read one of two ways:

- If no entry is positive, the numbers are taken as costs as they stand.
- Otherwise they are read as similarity scores. The cost of each pair is
  `(s(r,r) + s(c,c)) / 2 - s(r,c)`.

The gap letter `-` is added from the deletion score.

## Library

```python
from tcrtrie.trie import Trie

trie = Trie(["CASSLGQETQYF", "CASSLGETQYF"])
trie.search("CASSLGQETQYF", 1)
# ['CASSLGETQYF', 'CASSLGQETQYF']  (order follows the trie)

trie = Trie.from_airr("reference.tsv")
hits = trie.search_airr("CASSLGQETQYF", 1, 0, 1, v_gene="TRBV7-9")
for hit in hits:
    print(hit.junction_aa, hit.v_gene, hit.j_gene, hit.distance)

trie.load_substitution_matrix("blosum62.txt")
trie.search_with_matrix("CASSLGQETQYF", 4.0)
```

`Trie` methods:

- `search`, `search_many` and `search_any` do plain edit-distance search.
- `search_airr` and `search_for_all` apply separate limits on substitutions,
  insertions and deletions. They can also filter by `v_gene` and `j_gene`.
- `search_with_matrix` and `search_for_all_with_matrix` do weighted search. They
  need a loaded matrix and raise `MatrixNotLoadedError` without one.
- `set_deletion_score` changes the gap score and shifts the gap costs of a loaded
  matrix.
- `copy` returns an independent trie.

Only the letters `A` to `Z` are used to place a sequence in the trie. Results return
the sequence as it was given.

A query longer than `Trie.max_query_length` (default 32) makes the single-query
searches raise `QueryTooLongError`. The batch methods give such a query an empty
result instead.

Other building blocks:

- `tcrtrie.airr.parse_airr` reads AIRR files into `AIRREntity` records.
- `tcrtrie.levenshtein.detailed_levenshtein_all` gives the edit counts by kind for
  two strings. `tcrtrie.levenshtein.within_limits` checks them against per-kind
  limits.
- `tcrtrie.matrix.load_substitution_matrix` and `parse_substitution_matrix` build a
  `SubstitutionMatrix`.
- `tcrtrie.interface.run_search` runs a search from a `SearchConfig` and returns
  the path of the results file.

## What it does not do

The command accepts `--v-gene` and `--j-gene` but does not filter its results by
them. To filter by gene, use the `v_gene` and `j_gene` parameters of the `Trie`
search methods. Searches run one query at a time in a single thread.