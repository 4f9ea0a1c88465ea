"""
Unfreeze pipeline: freeze-point lookup, state reconstruction, state cache,
storage-fee debt, giver resolution, and redeploy through the microwave relay.
"""
