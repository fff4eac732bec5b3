"""Services for git-stacks: snapshot reading, staging and watching."""
