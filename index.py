# Name/type index over a parsed model, plus the lookups the tools need.


def build_index(model):
    by_name = {}
    by_type = {}
    for e in model['entities']:
        by_name[e['name']] = e
        by_type.setdefault(e['command'], []).append(e['name'])
    return {
        'by_name': by_name,
        'by_type': by_type
    }


def list_names_by_type(idx, entity_type):
    # entity_type is matched in uppercase, e.g. "CURVE"
    return idx['by_type'].get(entity_type.upper(), [])


def get_entity(idx, name, command=None):
    """Return the entity called name; KeyError if absent or of another command."""
    e = idx['by_name'].get(name)
    if e is None:
        raise KeyError("No such entity: " + name)
    if command is not None and e['command'] != command:
        raise KeyError(f"{name} is a {e['command']}, not a {command}")
    return e
