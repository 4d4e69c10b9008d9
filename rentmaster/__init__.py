"""RentMaster - property management backend."""
