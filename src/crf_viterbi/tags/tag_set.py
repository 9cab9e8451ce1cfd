START_LABEL = "<START>"
END_LABEL = "<END>"
SENTINEL = -10_000.0

"""
Maps label names to tag ids. Real labels take ids 0..T-1,
START is T and END is T+1, e.g. B, I, O, <START>, <END>.
"""

class TagSet:
    def __init__(self, labels: list[str]):
        labels = list(labels)
        for reserved in (START_LABEL, END_LABEL):
            if reserved in labels:
                raise ValueError(f"{reserved} is reserved and can't be used as a label")
        if len(set(labels)) != len(labels):
            raise ValueError(f"Duplicate labels in tag set: {labels}")

        self.labels = labels
        self.label2id = {label: i for i, label in enumerate(labels)}

    @property
    def num_tags(self) -> int:
        return len(self.labels)

    @property
    def size(self) -> int:
        return self.num_tags + 2

    @property
    def start_tag(self) -> int:
        return self.num_tags

    @property
    def end_tag(self) -> int:
        return self.num_tags + 1

    def encode(self, labels: list[str]) -> list[int]:
        try:
            return [self.label2id[label] for label in labels]
        except KeyError as e:
            raise ValueError(f"Unknown label {e} for tag set {self.labels}") from e

    def decode(self, tags: list[int]) -> list[str]:
        out = []
        for tag in tags:
            if not 0 <= tag < self.num_tags:
                raise ValueError(f"Tag {tag} is not a real label in [0, {self.num_tags})")
            out.append(self.labels[tag])
        return out

    def __len__(self):
        return self.num_tags

    def __repr__(self):
        return f"TagSet({self.labels + [START_LABEL, END_LABEL]})"
