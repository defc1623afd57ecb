class WorkloadLoader:
    def load_trace(self, path):
        """Read a text request trace.

        Each non-empty line is either `<value>` or `<client_index> <value>`.
        Lines starting with '#' are comments. Returns a list of
        (client_index or None, value) tuples.
        """
        requests = []
        with open(path, 'r') as f:
            for lineno, line in enumerate(f, 1):
                s = line.strip()
                if not s or s.startswith('#'):
                    continue
                parts = s.split(None, 1)
                if len(parts) == 1:
                    requests.append((None, parts[0]))
                    continue
                try:
                    client = int(parts[0], 0)
                except ValueError:
                    raise ValueError(f"{path}:{lineno}: bad client index {parts[0]!r}") from None
                if client < 0:
                    raise ValueError(f"{path}:{lineno}: bad client index {parts[0]!r}")
                requests.append((client, parts[1].strip()))
        return requests
